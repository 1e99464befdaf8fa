# File: app/api/v1/routes_products.py

"""
Product endpoints.

Create and update accept either a JSON body or multipart form data; only
multipart requests can carry an ``image`` file.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.api.deps import get_current_user, get_db, get_storage, require_ability
from app.core.config import settings
from app.core.exceptions import FieldErrors, ValidationError, field_errors, merge_errors
from app.schemas.pagination import Page
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services import product_service
from app.services.storage import ImageStorage, ImageUpload

router = APIRouter()

WRITE_ABILITY = "products:write"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class ProductForm:
    fields: dict[str, Any] = field(default_factory=dict)
    image: Optional[ImageUpload] = None


async def read_product_form(request: Request) -> ProductForm:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError("Malformed JSON body.") from exc
        if not isinstance(body, dict):
            raise ValidationError("The request body must be a JSON object.")
        body.pop("image", None)
        return ProductForm(fields=body)

    form = await request.form()
    product_form = ProductForm()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == "image" and value.filename:
                product_form.image = ImageUpload(
                    filename=value.filename,
                    content_type=value.content_type or "",
                    data=await value.read(),
                )
            continue
        if value == "":
            # Empty inputs mean "not sent", except description which can be cleared
            if key == "description":
                product_form.fields[key] = None
            continue
        product_form.fields[key] = value
    return product_form


def _validated(schema: Type[SchemaT], form: ProductForm, storage: ImageStorage) -> SchemaT:
    """Validate fields and image together so every problem is reported at once."""
    errors: FieldErrors = {}
    payload = None
    try:
        payload = schema.model_validate(form.fields)
    except PydanticValidationError as exc:
        errors = field_errors(exc.errors())
    if form.image is not None:
        image_problems = storage.validate(form.image)
        if image_problems:
            errors = merge_errors(errors, {"image": image_problems})
    if errors:
        raise ValidationError(errors=errors)
    return payload


def _page_path(request: Request) -> str:
    return str(request.url.replace(query=""))


@router.get("", response_model=Page[ProductRead], summary="List products, newest first")
def list_products(
    request: Request,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return product_service.list_products(db, page=page, per_page=settings.page_size, path=_page_path(request))


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
def create_product(
    token=Depends(require_ability(WRITE_ABILITY)),
    form: ProductForm = Depends(read_product_form),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    payload = _validated(ProductCreate, form, storage)
    return product_service.create_product(db, storage, payload, form.image)


@router.get("/{product_id}", response_model=ProductRead, summary="Show a product")
def show_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return product_service.get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductRead, summary="Update a product")
def update_product(
    product_id: int,
    token=Depends(require_ability(WRITE_ABILITY)),
    form: ProductForm = Depends(read_product_form),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    """
    Fields that are not sent keep their value. A new ``image`` replaces the
    stored file; ``clear_image=1`` without an image removes it.
    """
    product = product_service.get_product_or_404(db, product_id)
    payload = _validated(ProductUpdate, form, storage)
    return product_service.update_product(db, storage, product, payload, form.image)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a product")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
    token=Depends(require_ability(WRITE_ABILITY)),
):
    product = product_service.get_product_or_404(db, product_id)
    product_service.delete_product(db, storage, product)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
