"""HoldingRecord model - persisted run of identical lots owned by a user."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, UniqueConstraint

from database import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class HoldingRecord(Base):
    """One ``{symbol, name, quantity, price, purchasePrice}`` row of a user's holdings.

    A user's holding is stored as an ordered list of these rows
    (``position`` preserves insertion order). Each row stands for
    ``quantity`` consecutive lots with the same symbol, name, acquisition
    price and price hint. The whole list is rewritten on every trade.
    """

    __tablename__ = "holding_records"
    __table_args__ = (
        UniqueConstraint("username", "position", name="uq_holding_record_username_position"),
        CheckConstraint("quantity > 0", name="ck_holding_record_quantity_positive"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    symbol = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))  # Price hint at purchase
    purchase_price = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
