"""
Trek schemas for API requests/responses
"""
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from datetime import datetime
from typing import Any, List, Mapping, Optional

from trekhub.core.exceptions import ValidationError
from trekhub.models.trek import TrekDifficulty
from trekhub.schemas.base import to_field_errors


class TrekCreate(BaseModel):
    """Schema for creating a trek; also the full set of rules a stored trek must satisfy"""
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    difficulty: TrekDifficulty
    price: float = Field(..., ge=0, allow_inf_nan=False)
    images: List[str] = Field(default_factory=list)

    model_config = {"str_strip_whitespace": True}


class TrekUpdate(BaseModel):
    """Schema for updating a trek; only provided fields are merged"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    difficulty: Optional[TrekDifficulty] = None
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    images: Optional[List[str]] = None

    model_config = {"str_strip_whitespace": True}


class TrekRead(BaseModel):
    """Schema for trek read response"""
    id: int
    owner_id: int
    name: str
    location: str
    difficulty: TrekDifficulty
    price: float
    images: List[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TrekPage(BaseModel):
    """One page of the trek listing; ``total`` counts every trek"""
    treks: List[TrekRead]
    total: int
    page: int
    limit: int


def validate_trek_payload(data: Mapping[str, Any]) -> TrekCreate:
    """
    Validate a complete trek record.

    Raises:
        ValidationError: listing every failing field
    """
    try:
        return TrekCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(to_field_errors(exc.errors()))
