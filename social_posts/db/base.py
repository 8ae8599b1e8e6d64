"""SQLAlchemy Declarative Base — shared base class for ORM-declared tables.

Invariants:
    - All models inherit from Base
    - Base.metadata is the single source of truth for table definitions;
      Schema.table() and the Alembic env both read it

Design Decisions:
    - Separate file for Base: the models and the infrastructure layer import it
      without importing each other
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass
