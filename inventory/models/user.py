"""ORM model for application users (auth and RBAC)."""

from pydantic import SecretStr
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint, func

from inventory.core.security import hash_password
from inventory.models.base import Base

ROLES = ("user", "admin")


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def set_password(self, password: SecretStr) -> None:
        """Replace the stored hash; the plaintext is never kept."""
        self.password_hash = hash_password(password)
