"""SQLAlchemy ORM models."""

from __future__ import annotations

import datetime

from sqlalchemy import CheckConstraint, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

GENDERS = ("Male", "Female", "Other")
MIN_AGE = 1
MAX_AGE = 150


class Base(DeclarativeBase):
    pass


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = (
        CheckConstraint(f"age BETWEEN {MIN_AGE} AND {MAX_AGE}", name="ck_patients_age"),
        CheckConstraint(
            "gender IN (" + ", ".join(f"'{g}'" for g in GENDERS) + ")",
            name="ck_patients_gender",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    age: Mapped[int]
    gender: Mapped[str] = mapped_column(String(10))
    village: Mapped[str] = mapped_column(String(200))
    health_issue: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )
