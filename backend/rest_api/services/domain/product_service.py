"""
Product Service - catalog management.

Handles:
- Listing the catalog in creation order
- Creating a product together with its uploaded image
- Deleting a product and cleaning up its stored image

Usage:
    from rest_api.services.domain import ProductService

    service = ProductService(db, storage, publisher)
    product = service.create_product(name, price, filename, content_type, data)
"""

from __future__ import annotations

import math
from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Product
from rest_api.services.base_service import BaseCRUDService
from shared.config.logging import catalog_logger as logger
from shared.config.settings import settings
from shared.infrastructure.events import EventPublisher, PRODUCT_CREATED, PRODUCT_DELETED
from shared.infrastructure.storage import ImageStorage, ImageStorageError
from shared.utils.exceptions import AppException, InvalidImageError, StorageError, ValidationError
from shared.utils.schemas import ProductOutput
from shared.utils.validators import validate_image_upload


class ProductService(BaseCRUDService[Product, ProductOutput]):
    """
    Service for product management.

    Business rules:
    - name, price and image are required; price must be positive
    - the image must be a jpeg/jpg/png/gif within MAX_IMAGE_BYTES
    - products are immutable; deleting one also removes its image
    """

    def __init__(
        self,
        db: Session,
        storage: ImageStorage,
        publisher: EventPublisher | None = None,
        max_image_bytes: int | None = None,
    ):
        super().__init__(
            db=db,
            model=Product,
            output_schema=ProductOutput,
            entity_name="Product",
            publisher=publisher,
        )
        self._storage = storage
        self._max_image_bytes = max_image_bytes or settings.max_image_bytes

    # =========================================================================
    # Create
    # =========================================================================

    def create_product(
        self,
        name: str | None,
        price: float | None,
        filename: str | None,
        content_type: str | None,
        data: bytes | None,
    ) -> ProductOutput:
        """
        Store the image, then persist the product pointing at it.

        The image is checked first, so a request without one always fails
        with "Imagem é obrigatória".

        Raises:
            ValidationError: Missing/invalid image, blank name, or a price that is not a
                finite positive number.
            StorageError: The image could not be stored.
        """
        try:
            validate_image_upload(filename, content_type, len(data or b""), self._max_image_bytes)
        except ValueError as e:
            raise InvalidImageError(str(e), filename=filename, content_type=content_type)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if price is None or not math.isfinite(price) or price <= 0:
            raise ValidationError("Price must be a positive number", field="price")

        try:
            stored = self._storage.save(filename, content_type, data)
        except ImageStorageError as e:
            raise StorageError("store product image", error=str(e))

        try:
            product = self.create(
                {
                    "name": name,
                    "price": price,
                    "image_url": stored.url,
                    "image_key": stored.key,
                }
            )
        except AppException:
            # Nothing references the image if the insert failed
            self._remove_image(stored.key)
            raise

        logger.info("Product created", product_id=product.id, image_key=stored.key)
        return product

    def _after_create(self, entity: Product) -> None:
        self.publish(PRODUCT_CREATED, self.to_output(entity).model_dump(mode="json", by_alias=True))

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_product(self, product_id: int) -> None:
        """
        Delete the record, then its image.

        Raises:
            NotFoundError: Product does not exist.
        """
        self.delete(product_id)
        logger.info("Product deleted", product_id=product_id)

    def _get_entity_info_for_event(self, entity: Product) -> dict[str, Any]:
        return {"id": entity.id, "image_key": entity.image_key}

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        self._remove_image(entity_info["image_key"])
        self.publish(PRODUCT_DELETED, {"id": entity_info["id"]})

    def _remove_image(self, key: str) -> None:
        """Image cleanup never fails the request; leftovers are only logged."""
        try:
            self._storage.delete(key)
        except ImageStorageError as e:
            logger.warning("Could not remove product image", image_key=key, error=str(e))
