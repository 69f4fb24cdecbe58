"""CSV exports: current stock and transaction history."""

from datetime import date

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from clinic_stock.api.deps import CurrentClinic, Session
from clinic_stock.core.config import get_settings
from clinic_stock.services.ledger import list_transactions
from clinic_stock.services.reports import (
    STOCK_HEADERS,
    TRANSACTION_HEADERS,
    day_bounds,
    export_filename,
    stock_report_rows,
    to_delimited_text,
    transaction_report_rows,
)
from clinic_stock.services.stock import load_stock

router = APIRouter(prefix="/exports", tags=["exports"])


def _csv_response(text: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([text.encode("utf-8")]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/current-stock")
async def export_current_stock(ctx: CurrentClinic, session: Session) -> StreamingResponse:
    snapshot = await load_stock(session, ctx.clinic_id)
    text = to_delimited_text(STOCK_HEADERS, stock_report_rows(snapshot))
    return _csv_response(text, export_filename("current_stock"))


@router.get("/transactions")
async def export_transactions(
    ctx: CurrentClinic,
    session: Session,
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
) -> StreamingResponse:
    """Full ledger in date order; ``from``/``to`` are inclusive local dates."""
    tz_name = get_settings().report_timezone
    start, end = day_bounds(date_from, date_to, tz_name)
    entries = await list_transactions(
        session, ctx.clinic_id, start=start, end=end, newest_first=False,
    )
    text = to_delimited_text(TRANSACTION_HEADERS, transaction_report_rows(entries, tz_name))
    return _csv_response(text, export_filename("inventory_transactions"))
