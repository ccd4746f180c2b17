"""Pydantic models for form submissions."""

from uuid import UUID

from pydantic import BaseModel, Field


class ReferenceMealForm(BaseModel):
    """Add-meal form payload."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0, allow_inf_nan=False)
    protein: float = Field(ge=0, allow_inf_nan=False)
    fat: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)


class DailyEntryForm(BaseModel):
    """Add-entry form payload."""

    meal_id: UUID
    portions: float = Field(gt=0, allow_inf_nan=False)
