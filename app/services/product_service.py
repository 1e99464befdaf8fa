# File: app/services/product_service.py

"""
Product CRUD including the lifecycle of the product image file.

Old image files are removed only after the database change committed, so a
failed update never leaves a row pointing at a deleted file.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound
from app.core.pagination import paginate
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.storage import ImageStorage, ImageUpload

logger = logging.getLogger(__name__)

_NOT_NULLABLE = ("name", "price", "stock")


def list_products(db: Session, *, page: int, per_page: int, path: str) -> dict[str, Any]:
    stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    return paginate(db, stmt, page=page, per_page=per_page, path=path)


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found.")
    return product


def create_product(
    db: Session,
    storage: ImageStorage,
    payload: ProductCreate,
    image: Optional[ImageUpload] = None,
) -> Product:
    image_url = storage.store(image) if image is not None else None
    product = Product(**payload.model_dump(), image=image_url)
    db.add(product)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(image_url)
        raise
    db.refresh(product)

    logger.info("Created product id=%s name=%r", product.id, product.name)
    return product


def update_product(
    db: Session,
    storage: ImageStorage,
    product: Product,
    payload: ProductUpdate,
    image: Optional[ImageUpload] = None,
) -> Product:
    changes = payload.model_dump(exclude_unset=True)
    clear_image = changes.pop("clear_image", False)
    for key in _NOT_NULLABLE:
        if key in changes and changes[key] is None:
            del changes[key]

    previous_image = product.image
    new_image = storage.store(image) if image is not None else None
    if new_image is not None:
        product.image = new_image
    elif clear_image:
        product.image = None

    for key, value in changes.items():
        setattr(product, key, value)

    try:
        db.commit()
    except Exception:
        db.rollback()
        # Roll back the freshly written file as well
        storage.delete(new_image)
        raise
    db.refresh(product)

    if previous_image and product.image != previous_image:
        storage.delete(previous_image)

    logger.info("Updated product id=%s", product.id)
    return product


def delete_product(db: Session, storage: ImageStorage, product: Product) -> None:
    product_id, image_url = product.id, product.image
    db.delete(product)
    db.commit()
    if image_url:
        storage.delete(image_url)
    logger.info("Deleted product id=%s", product_id)
