"""Patient API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_session
from src.dependencies import require_session
from src.models.schemas import (
    PatientCreate,
    PatientCreatedResponse,
    PatientListResponse,
    PatientResponse,
)
from src.services.auth_service import TokenClaims
from src.services.patient_service import (
    create_patient,
    get_all_patients,
    validate_patient_input,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])


@router.post("", response_model=PatientCreatedResponse, status_code=201)
async def add_patient(
    body: PatientCreate,
    claims: TokenClaims = Depends(require_session),
    session: AsyncSession = Depends(get_session),
) -> PatientCreatedResponse:
    fields = validate_patient_input(
        body.name, body.age, body.gender, body.village, body.health_issue
    )
    logger.debug("Adding patient for %s", claims.username)
    patient = await create_patient(session, fields)
    return PatientCreatedResponse(patient=PatientResponse.model_validate(patient))


@router.get("", response_model=PatientListResponse)
async def list_patients(
    claims: TokenClaims = Depends(require_session),
    session: AsyncSession = Depends(get_session),
) -> PatientListResponse:
    logger.debug("Fetching patients for %s", claims.username)
    patients = await get_all_patients(session)
    return PatientListResponse(
        patients=[PatientResponse.model_validate(p) for p in patients],
        count=len(patients),
    )
