"""Product (inventory asset) persistence: CRUD, search and unique-field conflict mapping."""

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from inventory.core.database import UniqueConflict, commit_or_conflict
from inventory.models import Product
from inventory.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Unique constraint name -> (request field, client message).
DUPLICATE_FIELDS: dict[str, tuple[str, str]] = {
    "uq_products_staff_id": ("staffId", "Staff ID already exists"),
    "uq_products_serial_number": ("serialNumber", "Serial number already exists"),
}

# Columns matched by free-text search.
SEARCH_COLUMNS = (
    Product.first_name,
    Product.last_name,
    Product.department,
    Product.make,
    Product.model,
    Product.serial_number,
)

_NEWEST_FIRST = (Product.created_at.desc(), Product.id.desc())


class ProductNotFoundError(Exception):
    """No product with the requested id."""


class DuplicateFieldError(Exception):
    """A unique product field (staffId or serialNumber) is already in use."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


def _save(db: Session, product: Product) -> Product:
    try:
        commit_or_conflict(db, product)
    except UniqueConflict as e:
        if e.constraint not in DUPLICATE_FIELDS:
            raise
        field, message = DUPLICATE_FIELDS[e.constraint]
        raise DuplicateFieldError(field, message) from e
    db.refresh(product)
    return product


def list_products(db: Session) -> list[Product]:
    return list(db.scalars(select(Product).order_by(*_NEWEST_FIRST)))


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError()
    return product


def create_product(db: Session, body: ProductCreate) -> Product:
    """Insert a product. Raises DuplicateFieldError on a staffId/serialNumber clash."""
    product = Product(**body.model_dump())
    db.add(product)
    product = _save(db, product)
    logger.info("Created product id=%s staff_id=%s", product.id, product.staff_id)
    return product


def update_product(db: Session, product_id: int, body: ProductUpdate) -> Product:
    """
    Apply the fields present in ``body`` to an existing product.

    Raises ProductNotFoundError, or DuplicateFieldError on a staffId/serialNumber clash.
    """
    product = get_product(db, product_id)
    for name, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, name, value)
    return _save(db, product)


def delete_product(db: Session, product_id: int) -> None:
    """Delete by id in one statement. Raises ProductNotFoundError if nothing was deleted."""
    result = db.execute(delete(Product).where(Product.id == product_id))
    db.commit()
    if result.rowcount == 0:
        raise ProductNotFoundError()
    logger.info("Deleted product id=%s", product_id)


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_products(db: Session, query: str) -> list[Product]:
    """Case-insensitive substring match on any search column, newest first."""
    pattern = _like_pattern(query)
    stmt = (
        select(Product)
        .where(or_(*(column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS)))
        .order_by(*_NEWEST_FIRST)
    )
    return list(db.scalars(stmt))
