"""CSV report building for stock and transaction exports."""

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from clinic_stock.models.item import Item
from clinic_stock.models.transaction import InventoryTransaction, TransactionType
from clinic_stock.services.stock import StockSnapshot

# UTF-8 byte-order mark so spreadsheet tools detect the encoding
BOM = "\ufeff"

STOCK_HEADERS = ["Category", "Item", "Current stock", "Unit", "Reorder threshold"]
TRANSACTION_HEADERS = ["Date", "Item", "Type", "Quantity", "Unit", "Memo"]

TYPE_LABELS = {
    TransactionType.IN: "In",
    TransactionType.OUT: "Out",
    TransactionType.ADJUST: "Adjust",
}


def to_delimited_text(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Render a header line plus one line per row as comma-separated text.

    Fields containing a comma, quote or line break are quoted with inner
    quotes doubled. ``None`` renders as an empty field.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if cell is None else str(cell) for cell in row])
    return BOM + output.getvalue()


def type_label(type_: str) -> str:
    try:
        return TYPE_LABELS[TransactionType(type_)]
    except ValueError:
        return str(type_)


def local_date(value: datetime, tz_name: str) -> str:
    """Format a naive-UTC timestamp as YYYY-MM-DD in the report timezone."""
    aware = value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value
    return aware.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d")


def day_bounds(
    start: date | None, end: date | None, tz_name: str
) -> tuple[datetime | None, datetime | None]:
    """Inclusive calendar-day range in the report timezone → naive-UTC bounds."""
    tz = ZoneInfo(tz_name)

    def _utc(day: date, at: time) -> datetime:
        return datetime.combine(day, at, tzinfo=tz).astimezone(timezone.utc).replace(tzinfo=None)

    lower = _utc(start, time.min) if start else None
    upper = _utc(end, time(23, 59, 59, 999999)) if end else None
    return lower, upper


def stock_report_rows(snapshot: StockSnapshot) -> list[list[str]]:
    names = snapshot.category_names
    rows = [
        [
            names.get(item.category_id, ""),
            item.name,
            str(snapshot.level(item.id).balance),
            item.unit,
            str(item.reorder_threshold),
        ]
        for item in snapshot.items
    ]
    rows.sort(key=lambda r: (r[0], r[1]))
    return rows


def transaction_report_rows(
    entries: Iterable[tuple[InventoryTransaction, Item]], tz_name: str
) -> list[list[str]]:
    return [
        [
            local_date(txn.occurred_at, tz_name),
            item.name,
            type_label(txn.type),
            str(txn.qty),
            item.unit,
            txn.memo or "",
        ]
        for txn, item in entries
    ]


def export_filename(prefix: str, today: date | None = None) -> str:
    day = today or datetime.now(timezone.utc).date()
    return f"{prefix}_{day.isoformat()}.csv"
