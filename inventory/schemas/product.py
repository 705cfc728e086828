"""Request/response schemas and validation rules for product (inventory asset) endpoints."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from inventory.core.validation import (
    INT32_MAX,
    RuleSet,
    field,
    iso8601_date,
    non_empty,
    one_of,
    parse_iso8601_date,
    positive_int,
)

Status = Literal["functional", "non-functional"]

# (wire name, label used in messages) for the free-text fields, in form order.
TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("firstName", "First name"),
    ("lastName", "Last name"),
    ("designation", "Designation"),
    ("department", "Department"),
    ("location", "Location"),
    ("block", "Block"),
    ("roomNumber", "Room number"),
    ("make", "Make"),
    ("model", "Model"),
    ("serialNumber", "Serial number"),
    ("capacityVA", "Capacity VA"),
)

STAFF_ID_MESSAGE = "Staff ID must be a positive integer"
ISSUE_DATE_MESSAGE = "Valid issue date is required"
STATUS_MESSAGE = "Status must be functional or non-functional"


def _product_rules(*, partial: bool) -> RuleSet:
    """Create rules require every field; update rules accept any subset."""
    suffix = "cannot be empty" if partial else "is required"
    text_rules = [
        field(name, non_empty(f"{label} {suffix}"), optional=partial)
        for name, label in TEXT_FIELDS
    ]
    return RuleSet(
        *text_rules[:2],
        field("staffId", positive_int(STAFF_ID_MESSAGE), optional=partial),
        *text_rules[2:],
        field("issueDate", iso8601_date(ISSUE_DATE_MESSAGE), optional=partial),
        field("status", one_of(("functional", "non-functional"), STATUS_MESSAGE), optional=True),
    )


PRODUCT_CREATE_RULES = _product_rules(partial=False)
PRODUCT_UPDATE_RULES = _product_rules(partial=True)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ProductCreate(_CamelModel):
    """Full asset record as submitted by an admin."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    staff_id: int = Field(..., gt=0, le=INT32_MAX)
    designation: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    block: str = Field(..., min_length=1, max_length=255)
    room_number: str = Field(..., min_length=1, max_length=64)
    make: str = Field(..., min_length=1, max_length=255)
    model: str = Field(..., min_length=1, max_length=255)
    serial_number: str = Field(..., min_length=1, max_length=255)
    capacity_va: str = Field(..., alias="capacityVA", min_length=1, max_length=64)
    issue_date: date
    status: Status = "functional"

    @field_validator("issue_date", mode="before")
    @classmethod
    def parse_issue_date(cls, v: object) -> date:
        return parse_iso8601_date(v)


class ProductUpdate(_CamelModel):
    """Partial asset update; unset fields are left as stored."""

    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    staff_id: int | None = Field(default=None, gt=0, le=INT32_MAX)
    designation: str | None = Field(default=None, min_length=1, max_length=255)
    department: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    block: str | None = Field(default=None, min_length=1, max_length=255)
    room_number: str | None = Field(default=None, min_length=1, max_length=64)
    make: str | None = Field(default=None, min_length=1, max_length=255)
    model: str | None = Field(default=None, min_length=1, max_length=255)
    serial_number: str | None = Field(default=None, min_length=1, max_length=255)
    capacity_va: str | None = Field(default=None, alias="capacityVA", min_length=1, max_length=64)
    issue_date: date | None = None
    status: Status | None = None

    @field_validator("issue_date", mode="before")
    @classmethod
    def parse_issue_date(cls, v: object) -> date | None:
        return None if v is None else parse_iso8601_date(v)


class ProductOut(_CamelModel):
    """Stored asset as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    staff_id: int
    designation: str
    department: str
    location: str
    block: str
    room_number: str
    make: str
    model: str
    serial_number: str
    capacity_va: str = Field(..., alias="capacityVA")
    issue_date: date
    status: Status
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    message: str
    product: ProductOut


class ProductDetailResponse(BaseModel):
    product: ProductOut


class ProductListResponse(BaseModel):
    products: list[ProductOut]
