#!/usr/bin/env python3
"""Twelve Data API key setup script.

Validates a Twelve Data API key by fetching a test quote, then stores it
in the OS keychain where Settings picks it up as QUOTE_API_KEY.

Usage:
    cd backend
    uv run python -m scripts.setup_quote_api              # prompt, validate, store
    uv run python -m scripts.setup_quote_api --show       # list stored keys (masked)
    uv run python -m scripts.setup_quote_api --delete     # remove the stored key
"""

import argparse
import getpass
import sys
from decimal import Decimal

from config import settings
from integrations.exceptions import ProviderError
from integrations.twelve_data_client import TwelveDataClient
from services.credential_manager import delete_credential, list_credentials, set_credential

CREDENTIAL_KEY = "QUOTE_API_KEY"
TEST_SYMBOL = "AAPL"


def _mask(value: str) -> str:
    """Show only the last four characters of a secret."""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def validate_api_key(api_key: str, base_url: str = settings.QUOTE_API_BASE_URL) -> Decimal:
    """Fetch a test quote with the key.

    Returns:
        The test symbol's current price.

    Raises:
        ProviderError: If the key is rejected or the request fails, or
            the upstream did not price the test symbol.
    """
    client = TwelveDataClient(
        api_key=api_key, base_url=base_url, timeout=settings.QUOTE_API_TIMEOUT_SECONDS
    )
    try:
        prices = client.get_current_prices([TEST_SYMBOL])
    finally:
        client.close()
    if TEST_SYMBOL not in prices:
        raise ProviderError(
            f"No price returned for {TEST_SYMBOL}", provider_name=client.provider_name
        )
    return prices[TEST_SYMBOL]


def show_credentials() -> None:
    stored = list_credentials()
    if not stored:
        print("No credentials stored in keychain.")
        return
    for key, value in stored.items():
        print(f"  {key} = {_mask(value)}")


def store_api_key(api_key: str, *, validate: bool = True) -> bool:
    """Optionally validate the key, then store it. Returns True on success."""
    api_key = api_key.strip()
    if not api_key:
        print("ERROR: API key is empty")
        return False

    if validate:
        try:
            price = validate_api_key(api_key)
        except ProviderError as e:
            print(f"ERROR: API key validation failed: {e}")
            return False
        print(f"Key accepted ({TEST_SYMBOL} = {price})")

    if not set_credential(CREDENTIAL_KEY, api_key):
        print(f"ERROR: Failed to store {CREDENTIAL_KEY} in keychain")
        return False
    print(f"Stored {CREDENTIAL_KEY} in keychain")
    return True


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Store the Twelve Data API key in the keychain")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--show", action="store_true", help="List stored credentials (masked)")
    group.add_argument("--delete", action="store_true", help="Remove the stored API key")
    parser.add_argument(
        "--skip-validation", action="store_true",
        help="Store the key without fetching a test quote",
    )
    args = parser.parse_args(argv)

    if args.show:
        show_credentials()
        return

    if args.delete:
        if delete_credential(CREDENTIAL_KEY):
            print(f"Deleted {CREDENTIAL_KEY} from keychain")
        else:
            print(f"{CREDENTIAL_KEY} was not stored or could not be deleted")
        return

    api_key = getpass.getpass("Twelve Data API key: ")
    if not store_api_key(api_key, validate=not args.skip_validation):
        sys.exit(1)


if __name__ == "__main__":
    main()
