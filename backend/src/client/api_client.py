"""Async HTTP client for the patient registry API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.client.notifications import LocalNotifier
from src.services.patient_service import validate_patient_input

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
REQUEST_TIMEOUT = 10.0
CONNECTION_TEST_TIMEOUT = 5.0


class ApiClientError(Exception):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str, code: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(message)


class NetworkError(Exception):
    """No usable response: timeout, refused connection, or non-JSON body."""


class PatientRegistryClient:
    """Talks to the registry on behalf of one field worker.

    The session token is held in memory after a successful login and sent as a
    bearer token on every later call. A 401 from the server clears it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        notifier: LocalNotifier | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.token: str | None = None
        self.is_online = True
        self.notifier = notifier
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> PatientRegistryClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await self._http.request(
                method,
                path,
                json=json,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            raise NetworkError(
                "Request timeout. Please check your internet connection."
            ) from e
        except httpx.TransportError as e:
            self.is_online = False
            raise NetworkError(
                f"Cannot connect to server at {self.base_url}. "
                "Please ensure the backend is running."
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError("Server returned non-JSON response") from e
        if not isinstance(data, dict):
            raise NetworkError("Server returned an unexpected response body")

        if response.is_error:
            if response.status_code == 401:
                self.token = None
            raise ApiClientError(
                response.status_code,
                data.get("error") or f"Request failed with status {response.status_code}",
                data.get("code"),
            )

        self.is_online = True
        return data

    async def test_connection(self) -> bool:
        """Probe /health with a short timeout; updates ``is_online``."""
        try:
            await self._request("GET", "/health", timeout=CONNECTION_TEST_TIMEOUT)
        except (NetworkError, ApiClientError):
            logger.warning("Connection test against %s failed", self.base_url)
            self.is_online = False
            return False
        return True

    async def login(self, username: str, password: str) -> dict[str, Any]:
        username, password = username.strip(), password.strip()
        if not username or not password:
            raise ValueError("Username and password are required")
        data = await self._request(
            "POST", "/login", json={"username": username, "password": password}
        )
        self.token = data["token"]
        logger.info("Logged in as %s", data["user"]["username"])
        return data

    async def add_patient(
        self,
        *,
        name: str,
        age: int | str,
        gender: str,
        village: str,
        health_issue: str,
    ) -> dict[str, Any]:
        """Register a patient. Field errors are raised locally before any request."""
        validate_patient_input(name, age, gender, village, health_issue)
        data = await self._request(
            "POST",
            "/patients",
            json={
                "name": name,
                "age": age,
                "gender": gender,
                "village": village,
                "healthIssue": health_issue,
            },
        )
        if self.notifier is not None:
            patient = data["patient"]
            self.notifier.notify_patient_added(patient["name"], patient["village"])
        return data

    async def get_patients(self) -> dict[str, Any]:
        data = await self._request("GET", "/patients")
        logger.debug("Retrieved %d patients", data["count"])
        return data

    async def check_server_health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")

    def logout(self) -> None:
        self.token = None
        self.is_online = True
