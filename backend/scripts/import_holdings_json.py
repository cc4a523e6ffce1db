#!/usr/bin/env python
"""Import user holdings from a legacy holdings.json file.

The file maps each username to an ordered list of records:

    {"holdings": {"alice": [
        {"symbol": "AAPL", "name": "Apple Inc.", "quantity": 3,
         "price": 190.0, "purchasePrice": 185.5}
    ]}}

``purchasePrice`` defaults to ``price`` when absent. Each imported user's
existing holdings are replaced.

Usage:
    cd backend
    uv run python -m scripts.import_holdings_json holdings.json [--dry-run]
"""

import argparse
import json
import sys
from decimal import Decimal, InvalidOperation

from database import get_session_local, init_db
from services.holding_record_service import HoldingRecordService
from services.lot_ledger_service import MAX_TRADE_QUANTITY, Holding, Lot


def _parse_decimal(val: str | int | float | None, field_name: str) -> Decimal:
    """Parse a value to Decimal, raising a clear error on failure."""
    if val is None:
        return Decimal("0")
    try:
        result = Decimal(str(val))
    except InvalidOperation:
        print(f"  ERROR: Cannot parse '{val}' as decimal for {field_name}")
        sys.exit(1)
    if not result.is_finite():
        print(f"  ERROR: Cannot parse '{val}' as decimal for {field_name}")
        sys.exit(1)
    return result


def _build_holding(username: str, records: list) -> Holding:
    """Expand a user's records into lots, skipping unusable entries."""
    lots: list[Lot] = []
    for index, rec in enumerate(records):
        if not isinstance(rec, dict):
            print(f"  SKIP: {username}[{index}] is not an object")
            continue
        symbol = rec.get("symbol")
        if not symbol:
            print(f"  SKIP: {username}[{index}] has no symbol")
            continue
        quantity = rec.get("quantity")
        valid = isinstance(quantity, int) and not isinstance(quantity, bool)
        if not valid or not 0 < quantity <= MAX_TRADE_QUANTITY:
            print(f"  SKIP: {username}[{index}] {symbol} has invalid quantity {quantity!r}")
            continue

        price = _parse_decimal(rec.get("price"), f"{symbol}.price")
        purchase_price = rec.get("purchasePrice")
        acquisition_price = (
            price if purchase_price is None
            else _parse_decimal(purchase_price, f"{symbol}.purchasePrice")
        )
        lot = Lot(
            symbol=symbol,
            company_name=rec.get("name") or "",
            acquisition_price=acquisition_price,
            current_price_hint=price,
        )
        lots.extend([lot] * quantity)
    return Holding(lots)


def import_holdings(json_path: str, dry_run: bool = False):
    """Import holdings for every user in the JSON file."""
    with open(json_path) as f:
        data = json.load(f)

    users = data.get("holdings") if isinstance(data, dict) else None
    if not isinstance(users, dict):
        print("ERROR: Missing 'holdings' object in JSON")
        sys.exit(1)

    print(f"Users: {len(users)}")
    print(f"Mode: {'DRY RUN' if dry_run else 'LIVE'}")
    print()

    init_db()
    SessionLocal = get_session_local()
    db = SessionLocal()

    try:
        existing = set(HoldingRecordService.list_usernames(db))
        total_lots = 0
        for username, records in users.items():
            if not isinstance(records, list):
                print(f"  SKIP: Holdings for '{username}' are not a list")
                continue
            holding = _build_holding(username, records)
            saved = HoldingRecordService.save_holding(db, username, holding)
            total_lots += len(holding)
            action = "replaced" if username in existing else "new"
            print(f"  {username} ({action}): {len(holding)} lots in {len(saved)} records")

        if dry_run:
            db.rollback()
            print(f"\nDRY RUN complete: would import {total_lots} lots for {len(users)} users")
        else:
            db.commit()
            print(f"\nImported: {total_lots} lots for {len(users)} users")

    except Exception as e:
        db.rollback()
        print(f"ERROR: {e}")
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Import user holdings from a legacy JSON file")
    parser.add_argument("json_file", help="Path to holdings.json")
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate and show what would be imported without writing to DB",
    )
    args = parser.parse_args()
    import_holdings(args.json_file, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
