"""SQLAlchemy ORM models."""

from .holding_record import HoldingRecord, generate_uuid

__all__ = ["HoldingRecord", "generate_uuid"]
