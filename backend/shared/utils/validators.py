"""
Shared validators for input sanitization.
"""

from pathlib import PurePosixPath

from shared.config.constants import (
    ALLOWED_IMAGE_CONTENT_TYPES,
    ALLOWED_IMAGE_EXTENSIONS,
)

IMAGE_REQUIRED_MESSAGE = "Imagem é obrigatória"


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively; store them lower-cased."""
    return email.strip().lower()


def validate_image_upload(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_bytes: int,
) -> None:
    """
    Validate an uploaded product image.

    Both the declared content type and the file extension must be one of
    jpeg/jpg/png/gif.

    Raises:
        ValueError: With a client-facing message describing the problem.
    """
    if not filename or size == 0:
        raise ValueError(IMAGE_REQUIRED_MESSAGE)

    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
        raise ValueError("Formato de imagem inválido (use jpeg, jpg, png ou gif)")

    extension = PurePosixPath(filename).suffix.lower()
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValueError("Extensão de imagem inválida (use .jpeg, .jpg, .png ou .gif)")

    if size > max_bytes:
        raise ValueError(f"Imagem excede o tamanho máximo de {max_bytes} bytes")

