"""Patient validation and data access service."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import PatientValidationError, StoreError
from src.models.orm import GENDERS, MAX_AGE, MIN_AGE, Patient

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]{1,4}")


@dataclass(frozen=True)
class PatientFields:
    name: str
    age: int
    gender: str
    village: str
    health_issue: str


def _clean_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def parse_age(value: object) -> int | None:
    """Parse an age given as int, integral float, or digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        stripped = value.strip()
        if _INTEGER_RE.fullmatch(stripped):
            return int(stripped)
    return None


def validate_patient_input(
    name: object,
    age: object,
    gender: object,
    village: object,
    health_issue: object,
) -> PatientFields:
    """Check the five form fields in order; the first failure is raised."""
    clean_name = _clean_text(name)
    if clean_name is None:
        raise PatientValidationError("InvalidName", "Patient name is required")

    parsed_age = parse_age(age)
    if parsed_age is None or not MIN_AGE <= parsed_age <= MAX_AGE:
        raise PatientValidationError(
            "InvalidAge", f"Valid age is required ({MIN_AGE}-{MAX_AGE})"
        )

    if not isinstance(gender, str) or gender not in GENDERS:
        raise PatientValidationError(
            "InvalidGender", f"Valid gender is required ({', '.join(GENDERS)})"
        )

    clean_village = _clean_text(village)
    if clean_village is None:
        raise PatientValidationError("InvalidVillage", "Village name is required")

    clean_issue = _clean_text(health_issue)
    if clean_issue is None:
        raise PatientValidationError(
            "InvalidHealthIssue", "Health issue description is required"
        )

    return PatientFields(
        name=clean_name,
        age=parsed_age,
        gender=gender,
        village=clean_village,
        health_issue=clean_issue,
    )


async def create_patient(session: AsyncSession, fields: PatientFields) -> Patient:
    patient = Patient(
        name=fields.name,
        age=fields.age,
        gender=fields.gender,
        village=fields.village,
        health_issue=fields.health_issue,
    )
    session.add(patient)
    try:
        await session.commit()
        await session.refresh(patient)
    except IntegrityError:
        await session.rollback()
        logger.exception("Store rejected patient record")
        raise PatientValidationError(
            "ValidationError",
            "Validation Error",
            details=["Patient record violates a store constraint"],
        )
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Failed to save patient")
        raise StoreError()
    logger.info("Patient saved: id=%d", patient.id)
    return patient


async def get_all_patients(session: AsyncSession) -> Sequence[Patient]:
    """All patients, most recently created first."""
    try:
        result = await session.execute(
            select(Patient).order_by(Patient.created_at.desc(), Patient.id.desc())
        )
    except SQLAlchemyError:
        logger.exception("Failed to fetch patients")
        raise StoreError()
    return result.scalars().all()
