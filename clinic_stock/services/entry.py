"""Form input parsing for inventory entries.

Everything here is pure: raw values in, parsed values out, or a
``ValidationError`` carrying the message shown to the user.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo

from clinic_stock.core.errors import ValidationError
from clinic_stock.models.base import utcnow
from clinic_stock.models.transaction import TransactionType

# A back-dated entry is recorded at this local hour of the chosen day
OCCURRED_AT_LOCAL_HOUR = 9

# Quantities and thresholds are stored in 32-bit INTEGER columns
MAX_STORED_INT = 2**31 - 1


def _to_decimal(raw: int | float | str | None) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = Decimal(raw)
    else:
        text = raw.strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


def _to_stored_int(value: Decimal, message: str) -> int:
    """Truncate toward zero, refusing values the INTEGER columns cannot hold."""
    if abs(value) >= MAX_STORED_INT + 1:
        raise ValidationError(message)
    return int(value)


def validate_entry(type_: str, raw_qty: int | float | str | None) -> int:
    """Check a transaction type and quantity, returning the quantity to store.

    ``in`` and ``out`` take a non-negative magnitude (direction comes from the
    type); ``adjust`` takes any non-zero signed delta. Fractions are
    truncated toward zero and zero is rejected. The value is returned as
    entered; the ledger applies the sign for ``out`` when aggregating.
    """
    try:
        kind = TransactionType(type_.strip() if isinstance(type_, str) else type_)
    except ValueError:
        raise ValidationError("Choose a transaction type (in, out or adjust)") from None

    value = _to_decimal(raw_qty)
    qty = _to_stored_int(value, "The quantity is too large") if value is not None else 0
    if qty == 0:
        raise ValidationError("Enter the quantity as a number (0 is not allowed)")

    if kind in (TransactionType.IN, TransactionType.OUT) and qty < 0:
        raise ValidationError("Enter a positive quantity for in/out entries")

    return qty


def parse_threshold(raw: int | float | str | None) -> int:
    """Reorder threshold: blank means 0, otherwise a non-negative integer."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    value = _to_decimal(raw)
    if value is None or value < 0:
        raise ValidationError("The reorder threshold must be a number of 0 or more")
    return _to_stored_int(value, "The reorder threshold is too large")


def require_name(raw: str | None, label: str) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError(f"Enter a {label} name")
    return name


def occurred_at_for(day: date | None, tz_name: str) -> datetime:
    """Naive-UTC timestamp for an entry dated ``day`` in the given timezone."""
    if day is None:
        return utcnow()
    local = datetime.combine(day, time(OCCURRED_AT_LOCAL_HOUR), tzinfo=ZoneInfo(tz_name))
    return local.astimezone(timezone.utc).replace(tzinfo=None)
