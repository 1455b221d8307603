"""SQLAlchemy adapter package for contactlink."""

from __future__ import annotations

from .mappings import contact_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyContactRepository, translate_storage_errors

__all__ = [
    "SqlAlchemyContactRepository",
    "contact_table",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
    "translate_storage_errors",
]
