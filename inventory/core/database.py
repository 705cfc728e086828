"""Database connection, session management and unique-constraint conflict detection."""

import logging
from collections.abc import Generator

from sqlalchemy import UniqueConstraint, create_engine, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from inventory.core.config import settings
from inventory.models.base import Base

logger = logging.getLogger(__name__)

_connect_args: dict = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # TestClient and uvicorn's threadpool share connections across threads.
    _connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class UniqueConflict(Exception):
    """A write violated the named unique constraint."""

    def __init__(self, constraint: str) -> None:
        self.constraint = constraint
        super().__init__(f"Unique constraint violated: {constraint}")


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def _unique_columns(instance: Base) -> list[tuple[str, str]]:
    """(constraint name, column name) for every single-column unique constraint of the row's table."""
    table = type(instance).__table__
    return [
        (constraint.name, constraint.columns.keys()[0])
        for constraint in table.constraints
        if isinstance(constraint, UniqueConstraint)
        and constraint.name
        and len(constraint.columns) == 1
    ]


def _driver_constraint_name(exc: IntegrityError) -> str | None:
    """Constraint name reported by the driver (psycopg2 diagnostics), if any."""
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None)


def _probe_conflict(db: Session, instance: Base, values: dict[str, object]) -> str | None:
    """Find which unique constraint already holds one of the row's values."""
    model = type(instance)
    for constraint, column in _unique_columns(instance):
        value = values.get(column)
        if value is None:
            continue
        stmt = select(model.id).where(getattr(model, column) == value)
        if values.get("id") is not None:
            stmt = stmt.where(model.id != values["id"])
        if db.execute(stmt.limit(1)).first() is not None:
            return constraint
    return None


def commit_or_conflict(db: Session, instance: Base) -> None:
    """
    Commit the session; on a unique violation roll back and raise UniqueConflict.

    The constraint name comes from the driver when it reports one; otherwise each
    single-column unique constraint of the instance's table is probed for a row
    already holding the value this write tried to store.
    """
    columns = ["id", *(column for _, column in _unique_columns(instance))]
    values = {column: getattr(instance, column) for column in columns}
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        constraint = _driver_constraint_name(exc) or _probe_conflict(db, instance, values)
        if constraint is None:
            raise
        logger.info("Unique conflict on %s", constraint)
        raise UniqueConflict(constraint) from exc
