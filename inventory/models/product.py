"""ORM model for inventory assets (exposed as products on the API)."""

from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint, func

from inventory.models.base import Base

STATUSES = ("functional", "non-functional")


class Product(Base):
    """
    An inventory asset assigned to a member of staff.

    staff_id and serial_number are each unique across all products; the
    constraint names are what conflict handling reports back to clients.
    """

    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("staff_id", name="uq_products_staff_id"),
        UniqueConstraint("serial_number", name="uq_products_serial_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    staff_id = Column(Integer, nullable=False)
    designation = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    block = Column(String(255), nullable=False)
    room_number = Column(String(64), nullable=False)
    make = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    serial_number = Column(String(255), nullable=False)
    capacity_va = Column(String(64), nullable=False)
    issue_date = Column(Date, nullable=False)
    status = Column(String(32), nullable=False, default="functional")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
