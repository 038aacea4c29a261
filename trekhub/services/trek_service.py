"""
Trek Service - trek CRUD with ownership checks
"""
import logging
from typing import Any, Mapping, Union

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from trekhub.core.db import store_operation
from trekhub.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from trekhub.models.trek import Trek
from trekhub.models.user import User
from trekhub.schemas.trek import TrekCreate, TrekPage, TrekRead, TrekUpdate, validate_trek_payload

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "location", "difficulty", "price", "images")


def is_owner(owner_id: int, caller_id: int) -> bool:
    """True when ``caller_id`` may modify a record owned by ``owner_id``."""
    return owner_id == caller_id


class TrekService:
    """Manages trek CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    @store_operation
    def list_treks(self, page: int = 1, limit: int = 10) -> TrekPage:
        """
        Page through all treks in creation order.

        Not scoped to the caller: every authenticated user sees every trek.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            The requested page plus the unpaged total
        """
        skip = (page - 1) * limit
        stmt = select(Trek).order_by(Trek.created_at, Trek.id).offset(skip).limit(limit)
        treks = self.db.execute(stmt).scalars().all()
        total = self.db.execute(select(func.count(Trek.id))).scalar() or 0
        return TrekPage(
            treks=[TrekRead.model_validate(t) for t in treks],
            total=total,
            page=page,
            limit=limit,
        )

    @store_operation
    def get_trek(self, trek_id: int) -> Trek:
        """
        Get a trek by ID. Any authenticated user may read any trek.

        Raises:
            NotFoundError: if no trek has this id
        """
        trek = self.db.get(Trek, trek_id)
        if trek is None:
            raise NotFoundError("Trek", trek_id)
        return trek

    @store_operation
    def create_trek(self, owner_id: int, trek_data: TrekCreate) -> Trek:
        """
        Create a trek owned by ``owner_id``.

        Raises:
            UnauthorizedError: if the owner no longer exists
        """
        if self.db.get(User, owner_id) is None:
            raise UnauthorizedError("User not found")

        trek = Trek(owner_id=owner_id, **trek_data.model_dump())
        self.db.add(trek)
        self.db.commit()
        self.db.refresh(trek)
        logger.info("Trek created", extra={"trek_id": trek.id, "user_id": owner_id})
        return trek

    @store_operation
    def update_trek(
        self, trek_id: int, user_id: int, changes: Union[TrekUpdate, Mapping[str, Any]]
    ) -> Trek:
        """
        Merge the provided fields into a trek owned by the caller.

        ``changes`` may be the raw request body: nothing in it is checked until
        the trek is known to exist and belong to the caller. Keys other than
        the editable fields are ignored. The merged record is validated as a
        whole, so a change that leaves the trek invalid is rejected.

        Raises:
            NotFoundError: if no trek has this id (checked first)
            ForbiddenError: if the caller does not own it
            ValidationError: if the merged record is invalid
        """
        trek = self._get_owned(trek_id, user_id)

        merged = {field: getattr(trek, field) for field in EDITABLE_FIELDS}
        if isinstance(changes, TrekUpdate):
            changes = changes.model_dump(exclude_unset=True)
        merged.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
        validated = validate_trek_payload(merged)

        for field, value in validated.model_dump().items():
            setattr(trek, field, value)

        self.db.commit()
        self.db.refresh(trek)
        logger.info("Trek updated", extra={"trek_id": trek.id, "user_id": user_id})
        return trek

    @store_operation
    def delete_trek(self, trek_id: int, user_id: int) -> None:
        """
        Delete a trek owned by the caller.

        Raises:
            NotFoundError: if no trek has this id (checked first)
            ForbiddenError: if the caller does not own it
        """
        trek = self._get_owned(trek_id, user_id)
        self.db.delete(trek)
        self.db.commit()
        logger.info("Trek removed", extra={"trek_id": trek_id, "user_id": user_id})

    def _get_owned(self, trek_id: int, user_id: int) -> Trek:
        trek = self.get_trek(trek_id)
        if not is_owner(trek.owner_id, user_id):
            logger.warning(
                "Trek modification refused for non-owner",
                extra={"trek_id": trek_id, "user_id": user_id},
            )
            raise ForbiddenError()
        return trek
