from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carmarket.infra.db.models.base import Base

if TYPE_CHECKING:
    from carmarket.infra.db.models.listing import ListingRow


class CarDetailRow(Base):
    __tablename__ = "car_details"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Vocabulary values, stored lowercased (see car_metadata)
    body_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    transmission: Mapped[str | None] = mapped_column(String(20), nullable=True)
    condition: Mapped[str | None] = mapped_column(String(20), nullable=True)
    color: Mapped[str | None] = mapped_column(String(30), nullable=True)

    mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)

    listing: Mapped[ListingRow | None] = relationship(back_populates="car_detail")
    images: Mapped[list[CarImageRow]] = relationship(
        back_populates="car_detail",
        order_by="CarImageRow.sort_order",
        cascade="all, delete-orphan",
    )


class CarImageRow(Base):
    __tablename__ = "car_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    car_detail_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("car_details.id", ondelete="CASCADE"),
        nullable=False,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    car_detail: Mapped[CarDetailRow] = relationship(back_populates="images")
