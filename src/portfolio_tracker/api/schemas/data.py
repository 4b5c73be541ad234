"""Pydantic schemas for export/import endpoints."""

from pydantic import BaseModel


class ImportPreviewResponse(BaseModel):
    """What an import file contains, shown before the user confirms it."""

    kind: str
    message: str
    account_count: int
    transaction_count: int


class ImportResultResponse(BaseModel):
    """Response schema for a committed import."""

    kind: str
    accounts_created: int
    transactions_imported: int
