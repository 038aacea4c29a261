"""
FastAPI dependency providers shared by the routers.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from trekhub.core.db import get_db
from trekhub.core.exceptions import UnauthorizedError
from trekhub.services.trek_service import TrekService
from trekhub.services.user_service import UserService


def get_current_user_id(request: Request) -> int:
    """
    Return the caller's user id as resolved by ``AuthenticationMiddleware``.

    Raises:
        UnauthorizedError: if the route was reached without passing the gate
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise UnauthorizedError("No token, authorization denied")
    return user_id


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_trek_service(db: Session = Depends(get_db)) -> TrekService:
    return TrekService(db)
