"""Product (inventory asset) routes: read and search for any authenticated user, writes for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from inventory.api.auth import get_current_user, require_admin
from inventory.core.database import get_db
from inventory.core.validation import validated_body
from inventory.schemas.auth import CurrentUser, MessageResponse
from inventory.schemas.product import (
    PRODUCT_CREATE_RULES,
    PRODUCT_UPDATE_RULES,
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
)
from inventory.services.products import (
    DuplicateFieldError,
    ProductNotFoundError,
    create_product,
    delete_product,
    get_product,
    list_products,
    search_products,
    update_product,
)

router = APIRouter()

product_create_body = validated_body(PRODUCT_CREATE_RULES, ProductCreate)
product_update_body = validated_body(PRODUCT_UPDATE_RULES, ProductUpdate)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


@router.get("", response_model=ProductListResponse)
def get_products(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProductListResponse:
    """Return every product, newest first."""
    products = list_products(db)
    return ProductListResponse(products=[ProductOut.model_validate(p) for p in products])


@router.get("/search/{query}", response_model=ProductListResponse)
def get_search(
    query: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProductListResponse:
    """
    Case-insensitive substring search over first name, last name, department,
    make, model and serial number. A product matches if any field contains the
    query. Results are newest first.
    """
    products = search_products(db, query)
    return ProductListResponse(products=[ProductOut.model_validate(p) for p in products])


@router.get("/{product_id}", response_model=ProductDetailResponse)
def get_product_by_id(
    product_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProductDetailResponse:
    try:
        product = get_product(db, product_id)
    except ProductNotFoundError as e:
        raise _not_found() from e
    return ProductDetailResponse(product=ProductOut.model_validate(product))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def post_product(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    body: Annotated[ProductCreate, Depends(product_create_body)],
    db: Annotated[Session, Depends(get_db)],
) -> ProductResponse:
    """Create a product (admin only). staffId and serialNumber must be unique."""
    try:
        product = create_product(db, body)
    except DuplicateFieldError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return ProductResponse(
        message="Product created successfully",
        product=ProductOut.model_validate(product),
    )


@router.put("/{product_id}", response_model=ProductResponse)
def put_product(
    product_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    body: Annotated[ProductUpdate, Depends(product_update_body)],
    db: Annotated[Session, Depends(get_db)],
) -> ProductResponse:
    """Update the fields present in the body (admin only)."""
    try:
        product = update_product(db, product_id, body)
    except ProductNotFoundError as e:
        raise _not_found() from e
    except DuplicateFieldError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return ProductResponse(
        message="Product updated successfully",
        product=ProductOut.model_validate(product),
    )


@router.delete("/{product_id}", response_model=MessageResponse)
def remove_product(
    product_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a product (admin only). Deleting an absent id is a 404 every time."""
    try:
        delete_product(db, product_id)
    except ProductNotFoundError as e:
        raise _not_found() from e
    return MessageResponse(message="Product deleted successfully")
