"""Persistence of user holdings as ordered HoldingRecord rows."""

import logging
from decimal import Decimal
from itertools import groupby

from sqlalchemy.orm import Session

from models import HoldingRecord
from services.lot_ledger_service import Holding, Lot

logger = logging.getLogger(__name__)


class HoldingRecordService:
    """Loads and saves a user's :class:`Holding`.

    Storage is a key-value mapping of username to an ordered list of
    ``{symbol, name, quantity, price, purchase_price}`` records. Saving
    replaces the user's whole list (last write wins).
    """

    @staticmethod
    def load_holding(db: Session, username: str) -> Holding:
        """Rebuild a user's holding from its records.

        Returns an empty holding for a user with no records.
        """
        records = (
            db.query(HoldingRecord)
            .filter(HoldingRecord.username == username)
            .order_by(HoldingRecord.position.asc())
            .all()
        )
        lots: list[Lot] = []
        for record in records:
            lot = Lot(
                symbol=record.symbol,
                company_name=record.name or "",
                acquisition_price=Decimal(record.purchase_price),
                current_price_hint=Decimal(record.price),
            )
            lots.extend([lot] * record.quantity)
        return Holding(lots)

    @staticmethod
    def save_holding(db: Session, username: str, holding: Holding) -> list[HoldingRecord]:
        """Rewrite all of a user's records from the holding.

        Consecutive identical lots collapse into one record, which keeps
        both insertion order and every lot's purchase price.
        """
        db.query(HoldingRecord).filter(HoldingRecord.username == username).delete(
            synchronize_session=False
        )

        records: list[HoldingRecord] = []
        for position, (lot, run) in enumerate(groupby(holding.lots)):
            record = HoldingRecord(
                username=username,
                position=position,
                symbol=lot.symbol,
                name=lot.company_name,
                quantity=sum(1 for _ in run),
                price=lot.current_price_hint,
                purchase_price=lot.acquisition_price,
            )
            db.add(record)
            records.append(record)
        db.flush()

        logger.info(
            "Saved holdings for %s: %d lots in %d records",
            username, len(holding), len(records),
        )
        return records

    @staticmethod
    def list_usernames(db: Session) -> list[str]:
        """Return every username that has at least one record."""
        rows = (
            db.query(HoldingRecord.username)
            .distinct()
            .order_by(HoldingRecord.username.asc())
            .all()
        )
        return [row.username for row in rows]
