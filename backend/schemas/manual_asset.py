"""Pydantic schemas for manual assets."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ManualAssetCreate(BaseModel):
    name: str = Field(min_length=1)
    current_value: Decimal = Field(ge=0)


class ManualAssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    current_value: Optional[Decimal] = Field(default=None, ge=0)


class ManualAssetResponse(BaseModel):
    id: str
    name: str
    current_value: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
