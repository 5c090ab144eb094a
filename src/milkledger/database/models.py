"""SQLAlchemy models for the remote store.

Every table is partitioned by ``user_id`` (the owner key). The primary key is
(id, user_id) with client-generated record ids, so an upsert keyed on it is
idempotent and never touches another owner's rows.
"""

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Float,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class OwnedRow:
    """Columns shared by every owner-scoped table."""

    id = Column(String, primary_key=True)
    user_id = Column(String, primary_key=True, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Person(OwnedRow, Base):
    """Person model."""

    __tablename__ = "people"

    name = Column(String, nullable=False)
    value = Column(Float, nullable=False, default=0.0)
    category = Column(String, nullable=False)


class VillageEntry(OwnedRow, Base):
    """Village entry model."""

    __tablename__ = "village_entries"

    person_id = Column(String, nullable=False)
    person_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    m_milk = Column(Float, nullable=False, default=0.0)
    m_fat = Column(Float, nullable=False, default=0.0)
    e_milk = Column(Float, nullable=False, default=0.0)
    e_fat = Column(Float, nullable=False, default=0.0)
    m_fat_kg = Column(Float, nullable=False, default=0.0)
    e_fat_kg = Column(Float, nullable=False, default=0.0)
    rate = Column(Float, nullable=False, default=0.0)
    amount = Column(Float, nullable=False, default=0.0)


class CityEntry(OwnedRow, Base):
    """City entry model."""

    __tablename__ = "city_entries"

    person_id = Column(String, nullable=False)
    person_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    value = Column(Float, nullable=False, default=0.0)
    rate = Column(Float, nullable=False, default=0.0)
    amount = Column(Float, nullable=False, default=0.0)


class DairyEntry(OwnedRow, Base):
    """Dairy entry model."""

    __tablename__ = "dairy_entries"

    person_id = Column(String, nullable=False)
    person_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    session = Column(String, nullable=False)
    milk = Column(Float, nullable=False, default=0.0)
    fat = Column(Float, nullable=False, default=0.0)
    meter = Column(Float, nullable=False, default=0.0)
    rate = Column(Float, nullable=False, default=0.0)
    fat_kg = Column(Float, nullable=False, default=0.0)
    meter_kg = Column(Float, nullable=False, default=0.0)
    fat_amount = Column(Float, nullable=False, default=0.0)
    meter_amount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)


class Payment(OwnedRow, Base):
    """Payment model."""

    __tablename__ = "payments"

    person_id = Column(String, nullable=False)
    person_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    comment = Column(String, nullable=False, default="")
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)


def create_remote_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for the remote store.

    SQLite connections are opened with ``check_same_thread=False`` because the
    connectivity probe runs on a worker thread.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to an engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)
