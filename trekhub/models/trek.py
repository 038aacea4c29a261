"""
Trek model: a hiking adventure listing owned by the user who created it
"""
from sqlalchemy import CheckConstraint, Column, Integer, String, Float, DateTime, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from trekhub.core.db import Base


class TrekDifficulty(str, enum.Enum):
    """Fixed difficulty scale"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Trek(Base):
    """
    Trek listing. ``owner_id`` records who may edit or delete it; any
    authenticated user may read it.
    """
    __tablename__ = "treks"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_treks_price_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    difficulty = Column(
        SQLEnum(TrekDifficulty, name="trek_difficulty", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    price = Column(Float, nullable=False)
    images = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    owner = relationship("User", back_populates="treks")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Trek id={self.id} name={self.name!r} owner_id={self.owner_id}>"
