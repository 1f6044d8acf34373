"""
Catalog router.
Product listing for staff; product creation (multipart upload) and deletion for admins.
"""

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from rest_api.core.context import get_app_settings, get_publisher, get_storage
from rest_api.models import Account
from rest_api.routers._common import current_account, require_admin
from rest_api.services.domain import ProductService
from shared.config.settings import Settings
from shared.infrastructure.db import get_db
from shared.infrastructure.events import EventPublisher
from shared.infrastructure.storage import ImageStorage
from shared.utils.schemas import ProductOutput


router = APIRouter(tags=["catalog"])


def get_product_service(
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
    publisher: EventPublisher = Depends(get_publisher),
    app_settings: Settings = Depends(get_app_settings),
) -> ProductService:
    return ProductService(
        db, storage, publisher, max_image_bytes=app_settings.max_image_bytes
    )


@router.get("/products", response_model=list[ProductOutput])
@router.get("/product", response_model=list[ProductOutput])
def list_products(
    service: ProductService = Depends(get_product_service),
    _: Account = Depends(current_account),
) -> list[ProductOutput]:
    """List the catalog in creation order."""
    return service.list_all()


@router.post("/product", response_model=ProductOutput, status_code=status.HTTP_201_CREATED)
def create_product(
    name: str | None = Form(None),
    price: float | None = Form(None),
    image: UploadFile | None = File(None),
    service: ProductService = Depends(get_product_service),
    _: Account = Depends(require_admin),
) -> ProductOutput:
    """
    Create a product from a multipart form: name, price and an image file.

    Accepted images: jpeg, jpg, png, gif up to MAX_IMAGE_BYTES.
    Broadcasts products@new.
    """
    filename = content_type = data = None
    if image is not None:
        filename = image.filename
        content_type = image.content_type
        data = image.file.read()
    return service.create_product(name, price, filename, content_type, data)


@router.delete("/product/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    _: Account = Depends(require_admin),
) -> Response:
    """Delete a product and its image. Broadcasts products@deleted."""
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
