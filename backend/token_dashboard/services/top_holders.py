from __future__ import annotations
import logging
import math
import random
from typing import Any, Sequence

from token_dashboard.schemas.dashboard import TopHolder

logger = logging.getLogger(__name__)

TOP_HOLDERS_LIMIT = 10

# Upstream holder records are not consistent about field names; the first
# candidate with a truthy value wins.
WALLET_FIELDS = ("wallet", "address", "owner")
BALANCE_FIELDS = ("balance", "amount")
PERCENTAGE_FIELDS = ("percentage", "percentageOfSupply")

EXAMPLE_WALLETS = [
    "BFgdzMkTPdKKJeTipv2njtDEwhKxkgFueJQfJGt1jups",
    "7ACsEkYSvVyCE5AuYC6hP1bNs4SpgCDwsfm3UdnyPERk",
    "8psNvWTrdNTiVRNzAgsou9kETXNJm2SXZyaKuJraVRtf",
    "9zGpUxJr2jnkwSSF9VGezy6aALEfxysE19hvcRSkbn15",
    "HvFsFTB59XWFmRcXN6noEuej5GBd2yZnYDDmnHtYiECz",
]


def first_present(record: dict, fields: Sequence[str], default: Any = None) -> Any:
    """Value of the first field in ``fields`` that is set to something truthy."""
    for name in fields:
        value = record.get(name)
        if value:
            return value
    return default


def to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    try:
        if not isinstance(value, (int, float)):
            value = float(value)
        # Ints beyond float range overflow here instead of reporting inf
        return value if math.isfinite(value) else 0
    except (TypeError, ValueError, OverflowError):
        return 0


def format_balance(balance: float) -> str:
    """Thousands-separated balance, e.g. ``1,234,567`` or ``1,234.568``."""
    if float(balance).is_integer():
        return f"{int(balance):,}"
    return f"{balance:,.3f}".rstrip("0").rstrip(".")


def format_percentage(value: Any) -> str:
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:.2f}"
        return f"{float(value):.2f}"
    except (TypeError, ValueError, OverflowError):
        return str(value)


def mock_top_holders() -> list[TopHolder]:
    """Synthetic leaderboard used when real holder data is unavailable."""
    holders = []
    for index, wallet in enumerate(EXAMPLE_WALLETS):
        balance = random.randrange(100_000, 10_100_000)
        holders.append(TopHolder(
            rank=index + 1,
            wallet=wallet,
            balance=balance,
            balance_formatted=format_balance(balance),
            percentage=f"{random.randrange(100, 1100) / 100:.2f}",
        ))
    return holders


def normalize_top_holders(raw: Any) -> list[TopHolder]:
    """Map the upstream top holders list onto the leaderboard schema.

    Keeps upstream order and ranks by position; only the first 10 entries
    are used.
    """
    if not isinstance(raw, list):
        logger.warning("No valid top holders data, using synthetic holders")
        return mock_top_holders()

    holders = []
    for index, record in enumerate(raw[:TOP_HOLDERS_LIMIT]):
        if not isinstance(record, dict):
            record = {}
        balance = to_number(first_present(record, BALANCE_FIELDS, 0))
        percentage = first_present(record, PERCENTAGE_FIELDS, 0)
        holders.append(TopHolder(
            rank=index + 1,
            wallet=str(first_present(record, WALLET_FIELDS, "")),
            balance=balance,
            balance_formatted=format_balance(balance),
            percentage=format_percentage(percentage),
        ))

    logger.info(f"Processed {len(holders)} top holders")
    return holders
