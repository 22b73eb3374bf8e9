"""
Atomic upsert utilities using ON CONFLICT

Replaces the check-then-insert pattern with a single
INSERT ... ON CONFLICT DO UPDATE statement. Supported on PostgreSQL
(production) and SQLite (tests, local development).

Usage:
    from portfolio.shared.upsert import atomic_upsert

    # Instead of:
    existing = db.query(Model).filter(Model.key == value).first()
    if existing:
        existing.data = new_data
    else:
        db.add(Model(key=value, data=new_data))
    db.commit()

    # Use:
    atomic_upsert(db, Model, 'key', value, {'data': new_data})
"""

from typing import Any, Dict, Type

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from portfolio.shared.database import Base


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise ValueError(f"Atomic upsert is not supported on dialect '{dialect}'")


def atomic_upsert(
    db: Session,
    model: Type[Base],
    unique_field: str,
    unique_value: Any,
    update_data: Dict[str, Any],
    auto_update_timestamp: bool = True,
    timestamp_field: str = 'updated_at'
) -> None:
    """
    Perform an atomic upsert on a table with a unique constraint.

    Inserts a row when ``unique_value`` is new, otherwise overwrites the
    fields in ``update_data`` on the existing row.

    Args:
        db: SQLAlchemy database session
        model: SQLAlchemy model class (e.g., Project, StatsCacheEntry)
        unique_field: Name of the unique field (e.g., 'slug')
        unique_value: Value for the unique field
        update_data: Dictionary of fields to set
        auto_update_timestamp: If True, set timestamp_field to NOW() on conflict
        timestamp_field: Name of timestamp field to auto-update (default: 'updated_at')

    Raises:
        ValueError: If model doesn't have required unique field or timestamp field
    """
    if not hasattr(model, unique_field):
        raise ValueError(f"Model {model.__name__} does not have field '{unique_field}'")

    if auto_update_timestamp and not hasattr(model, timestamp_field):
        raise ValueError(f"Model {model.__name__} does not have field '{timestamp_field}'")

    insert = _insert_for(db)
    stmt = insert(model).values(**{unique_field: unique_value, **update_data})

    update_dict = {key: getattr(stmt.excluded, key) for key in update_data}
    if auto_update_timestamp:
        update_dict[timestamp_field] = func.now()

    stmt = stmt.on_conflict_do_update(
        index_elements=[unique_field],
        set_=update_dict
    )
    db.execute(stmt)


def atomic_upsert_singleton(
    db: Session,
    model: Type[Base],
    data: Dict[str, Any],
    auto_update_timestamp: bool = True,
    timestamp_field: str = 'updated_at'
) -> None:
    """
    Perform an atomic upsert for single-row tables (id=1 pattern).

    Every column in ``data`` replaces the stored value, so passing the
    complete document gives whole-document replace semantics.

    Raises:
        ValueError: If data doesn't include 'id' or model doesn't have timestamp field
    """
    if 'id' not in data:
        raise ValueError("data must include 'id' field (typically id=1)")

    if auto_update_timestamp and not hasattr(model, timestamp_field):
        raise ValueError(f"Model {model.__name__} does not have field '{timestamp_field}'")

    insert = _insert_for(db)
    stmt = insert(model).values(**data)

    # excluded.<column> references the value that would have been inserted
    update_dict = {
        key: getattr(stmt.excluded, key)
        for key in data.keys()
        if key != 'id'
    }
    if auto_update_timestamp:
        update_dict[timestamp_field] = func.now()

    stmt = stmt.on_conflict_do_update(
        index_elements=['id'],
        set_=update_dict
    )
    db.execute(stmt)
