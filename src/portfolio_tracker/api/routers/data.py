"""Export and import endpoints."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from portfolio_tracker.api.deps import get_session
from portfolio_tracker.api.schemas import ImportPreviewResponse, ImportResultResponse
from portfolio_tracker.backup import export_filename, parse_payload
from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.services import ImportPlan, PortfolioSession

router = APIRouter(prefix="/data", tags=["data"])


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/export")
def export_data(
    scope: Literal["transactions", "account", "snapshot"] = Query("transactions"),
    format: Literal["json", "csv"] = Query("json"),
    account_id: Optional[str] = Query(None, description="Account ID (active account if empty)"),
    session: PortfolioSession = Depends(get_session),
) -> Response:
    """
    Download an export.

    - transactions: one account's transactions (JSON or CSV)
    - account: one account with its cash and transactions (JSON)
    - snapshot: every account and transaction (JSON)
    """
    exporter = session.exporter()
    if format == "csv":
        if scope != "transactions":
            raise ValidationError("CSV export is only available for transactions")
        return Response(
            content=exporter.transactions_csv(account_id),
            media_type="text/csv",
            headers=_attachment(export_filename(scope, "csv")),
        )

    if scope == "transactions":
        content = exporter.transactions_json(account_id)
    elif scope == "account":
        content = exporter.account_backup(account_id)
    else:
        content = exporter.full_backup()
    return JSONResponse(content=content, headers=_attachment(export_filename(scope, "json")))


async def _prepare(session: PortfolioSession, file: UploadFile) -> ImportPlan:
    raw = await file.read()
    return session.importer.prepare(parse_payload(raw, file.filename))


@router.post("/import/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(...),
    session: PortfolioSession = Depends(get_session),
) -> ImportPreviewResponse:
    """Describe what an import file would add, without writing anything."""
    plan = await _prepare(session, file)
    return ImportPreviewResponse(
        kind=plan.kind,
        message=plan.message,
        account_count=plan.account_count,
        transaction_count=plan.transaction_count,
    )


@router.post("/import", response_model=ImportResultResponse, status_code=201)
async def import_data(
    file: UploadFile = File(...),
    confirm: bool = Query(False, description="Must be true to write the import"),
    session: PortfolioSession = Depends(get_session),
) -> ImportResultResponse:
    """
    Import a file after the user confirmed its preview.

    Nothing is deduplicated; the portfolio is reloaded from the store afterwards.
    """
    plan = await _prepare(session, file)
    result = await session.importer.commit(plan, confirmed=confirm)
    return ImportResultResponse(
        kind=plan.kind,
        accounts_created=result.accounts_created,
        transactions_imported=result.transactions_imported,
    )
