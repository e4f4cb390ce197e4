"""Pydantic request/response/error schemas."""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Auth schemas ---


class LoginRequest(BaseModel):
    # Loosely typed so that missing/blank credentials surface as MissingCredentials.
    username: Any = None
    password: Any = None


class UserInfo(BaseModel):
    username: str
    role: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserInfo


# --- Patient API schemas ---


class PatientCreate(BaseModel):
    """Raw patient form input; typed loosely, checked by the patient service."""

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    age: Any = None
    gender: Any = None
    village: Any = None
    health_issue: Any = Field(default=None, alias="healthIssue")


class PatientResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    name: str
    age: int
    gender: Literal["Male", "Female", "Other"]
    village: str
    health_issue: str
    created_at: datetime.datetime
    updated_at: datetime.datetime


class PatientCreatedResponse(BaseModel):
    success: bool = True
    patient: PatientResponse
    message: str = "Patient added successfully"


class PatientListResponse(BaseModel):
    success: bool = True
    patients: list[PatientResponse]
    count: int


# --- Health schema ---


class HealthResponse(BaseModel):
    status: str
    message: str
    database: Literal["Connected", "Connecting", "Disconnecting", "Disconnected"]
    timestamp: datetime.datetime


# --- Error schema ---


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    details: list[str] | None = None
