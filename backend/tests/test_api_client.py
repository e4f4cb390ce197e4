"""API client tests, run against the app in-process."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from httpx import ASGITransport

from src.client.api_client import (
    ApiClientError,
    NetworkError,
    PatientRegistryClient,
)
from src.client.notifications import LocalNotifier
from src.errors import PatientValidationError
from src.main import app


@pytest.fixture
def notifier() -> LocalNotifier:
    return LocalNotifier()


@pytest.fixture
async def api(notifier: LocalNotifier) -> AsyncIterator[PatientRegistryClient]:
    async with PatientRegistryClient(
        "http://test", transport=ASGITransport(app=app), notifier=notifier
    ) as client:
        yield client


async def test_full_session(api: PatientRegistryClient, notifier: LocalNotifier) -> None:
    assert not api.is_authenticated
    await api.login(" asha_worker ", "password123")
    assert api.is_authenticated

    created = await api.add_patient(
        name="Ravi", age=34, gender="Male", village="Koli", health_issue="fever"
    )
    assert created["patient"]["age"] == 34

    listed = await api.get_patients()
    assert listed["count"] == 1

    assert [n.title for n in notifier.delivered] == ["Patient Added Successfully"]
    assert "Ravi" in notifier.delivered[0].body

    api.logout()
    assert not api.is_authenticated


async def test_login_requires_both_fields(api: PatientRegistryClient) -> None:
    with pytest.raises(ValueError):
        await api.login("   ", "password123")


async def test_bad_login_raises_api_error(api: PatientRegistryClient) -> None:
    with pytest.raises(ApiClientError) as exc_info:
        await api.login("asha_worker", "wrong")
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid credentials"
    assert not api.is_authenticated


async def test_add_patient_validates_before_sending(notifier: LocalNotifier) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"success": True})

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler), notifier=notifier
    ) as api:
        api.token = "token"
        with pytest.raises(PatientValidationError) as exc_info:
            await api.add_patient(
                name="Ravi", age=0, gender="Male", village="Koli", health_issue="fever"
            )
    assert exc_info.value.code == "InvalidAge"
    assert requests == []
    assert notifier.delivered == []


async def test_server_error_code_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"success": False, "error": "Validation Error", "code": "ValidationError"},
        )

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        with pytest.raises(ApiClientError) as exc_info:
            await api.add_patient(
                name="Ravi", age=34, gender="Male", village="Koli", health_issue="fever"
            )
    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "ValidationError"


async def test_health_and_connection_test(api: PatientRegistryClient) -> None:
    health = await api.check_server_health()
    assert health["database"] == "Connected"
    assert await api.test_connection() is True
    assert api.is_online


async def test_unauthorized_response_clears_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"success": False, "error": "Access token required"})

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        api.token = "stale"
        with pytest.raises(ApiClientError):
            await api.get_patients()
        assert api.token is None


async def test_timeout_becomes_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        with pytest.raises(NetworkError, match="timeout"):
            await api.get_patients()


async def test_unreachable_server_marks_offline() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        with pytest.raises(NetworkError, match="Cannot connect"):
            await api.get_patients()
        assert not api.is_online
        assert await api.test_connection() is False


async def test_non_json_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        with pytest.raises(NetworkError, match="non-JSON"):
            await api.check_server_health()


@pytest.mark.parametrize("body", [["not", "an", "object"], "oops", 42])
async def test_non_object_json_response(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    async with PatientRegistryClient(
        "http://test", transport=httpx.MockTransport(handler)
    ) as api:
        with pytest.raises(NetworkError, match="unexpected response body"):
            await api.check_server_health()
