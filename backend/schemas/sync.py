"""Pydantic schemas for the on-demand sync endpoint."""

from pydantic import BaseModel


class SyncResponse(BaseModel):
    user_id: str
    snapshots_created: int
    forward_filled: int
    transactions_imported: int
    failed_institution_ids: list[str]
