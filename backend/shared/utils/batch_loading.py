"""
Batch Loading Utilities.

Loads referenced rows in one query per entity type instead of one query
per reference (orders → tables, accounts, products).
"""

from typing import TypeVar, Generic, Callable, Iterable, Sequence

T = TypeVar("T")
K = TypeVar("K")


class DataLoader(Generic[K, T]):
    """
    Generic DataLoader for batch loading.

    Keys that the batch function does not return are remembered as
    missing, so a deleted reference is looked up only once.

    Usage:
        loader = DataLoader(
            batch_load_fn=lambda ids: db.scalars(select(Product).where(Product.id.in_(ids))).all(),
            key_fn=lambda product: product.id,
        )

        loader.load_many([1, 2, 3])   # one query
        loader.load(2)                # cached
    """

    def __init__(
        self,
        batch_load_fn: Callable[[list[K]], Sequence[T]],
        key_fn: Callable[[T], K],
        max_batch_size: int = 100,
    ):
        self._batch_load_fn = batch_load_fn
        self._key_fn = key_fn
        self._max_batch_size = max_batch_size
        self._cache: dict[K, T] = {}
        self._missing: set[K] = set()

    def load(self, key: K) -> T | None:
        """Load a single item by key. Returns None when it does not exist."""
        self.load_many([key])
        return self._cache.get(key)

    def load_many(self, keys: Iterable[K]) -> dict[K, T]:
        """Load multiple items by keys; absent keys are left out of the result."""
        keys = list(dict.fromkeys(keys))
        uncached_keys = [k for k in keys if k not in self._cache and k not in self._missing]

        for i in range(0, len(uncached_keys), self._max_batch_size):
            batch_keys = uncached_keys[i : i + self._max_batch_size]
            for item in self._batch_load_fn(batch_keys):
                self._cache[self._key_fn(item)] = item
            self._missing.update(k for k in batch_keys if k not in self._cache)

        return {k: self._cache[k] for k in keys if k in self._cache}

    def clear(self, key: K | None = None) -> None:
        """Clear the cache."""
        if key is None:
            self._cache.clear()
            self._missing.clear()
        else:
            self._cache.pop(key, None)
            self._missing.discard(key)
