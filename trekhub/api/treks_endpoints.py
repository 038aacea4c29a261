"""
Trek API endpoints - listing, reading and owner-only mutation of treks
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status

from trekhub.config.settings import get_settings
from trekhub.core.dependencies import get_current_user_id, get_trek_service
from trekhub.schemas.base import Message
from trekhub.schemas.trek import TrekCreate, TrekPage, TrekRead
from trekhub.services.trek_service import TrekService

router = APIRouter(prefix="/treks", tags=["treks"])


def coerce_positive_int(raw: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """Parse a query value, falling back to ``default`` when absent, non-numeric or < 1."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


@router.get("", response_model=TrekPage)
def list_treks(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size"),
    user_id: int = Depends(get_current_user_id),
    service: TrekService = Depends(get_trek_service),
):
    """
    List all treks, one page at a time

    - **page**: defaults to 1 when missing or invalid
    - **limit**: defaults to 10, capped at the configured maximum
    """
    config = get_settings().treks
    return service.list_treks(
        page=coerce_positive_int(page, 1),
        limit=coerce_positive_int(limit, config.default_page_size, config.max_page_size),
    )


@router.post("", response_model=TrekRead, status_code=status.HTTP_201_CREATED)
def create_trek(
    trek_data: TrekCreate,
    user_id: int = Depends(get_current_user_id),
    service: TrekService = Depends(get_trek_service),
):
    """
    Create a trek owned by the caller

    - **name**, **location**: non-empty
    - **difficulty**: Easy, Medium or Hard
    - **price**: zero or more
    - **images**: optional list of image URLs
    """
    return TrekRead.model_validate(service.create_trek(user_id, trek_data))


@router.get("/{trek_id}", response_model=TrekRead)
def get_trek(
    trek_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TrekService = Depends(get_trek_service),
):
    return TrekRead.model_validate(service.get_trek(trek_id))


@router.put("/{trek_id}", response_model=TrekRead)
def update_trek(
    trek_id: int,
    changes: Dict[str, Any] = Body(..., examples=[{"price": 1200, "difficulty": "Medium"}]),
    user_id: int = Depends(get_current_user_id),
    service: TrekService = Depends(get_trek_service),
):
    """
    Update a trek (owner only)

    Only provided fields are changed; the result must still be a valid trek.
    The fields are checked after the trek is found and its owner confirmed.
    """
    return TrekRead.model_validate(service.update_trek(trek_id, user_id, changes))


@router.delete("/{trek_id}", response_model=Message)
def delete_trek(
    trek_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TrekService = Depends(get_trek_service),
):
    """Delete a trek (owner only)"""
    service.delete_trek(trek_id, user_id)
    return Message(msg="Trek removed")
