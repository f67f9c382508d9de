import json

import httpx
import pytest

from ....features.credentials.store import InMemoryCredentialStore
from ....features.reports.client import ReportsClient
from ....features.reports.errors import MissingCredentialsError, MissingCronIdError, UpstreamError
from ....features.reports.payload import build_report_request
from ....features.reports.schemas import FailureReason

CREDENTIALS = {"apiKey": "k", "apiSecret": "s", "reportsUrl": "http://x"}


@pytest.fixture
def configured_store():
    return InMemoryCredentialStore({"credentials": CREDENTIALS})


@pytest.mark.asyncio
async def test_attach_credentials_merges_key_and_secret(configured_store, reports_client_factory):
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({"accountId": "acc"}))
    wire = payload.to_wire()
    assert wire["apiKey"] == "k"
    assert wire["apiSecret"] == "s"
    assert wire["accountId"] == "acc"
    assert "reportsUrl" not in wire


@pytest.mark.asyncio
async def test_attach_credentials_ignores_caller_supplied_keys(configured_store, reports_client_factory):
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({"apiKey": "forged", "apiSecret": "forged"}))
    assert (payload.api_key, payload.api_secret) == ("k", "s")


@pytest.mark.asyncio
@pytest.mark.parametrize("stored", [{}, {"apiKey": "k", "reportsUrl": "http://x"}, {"apiSecret": "s"}])
async def test_attach_credentials_requires_key_and_secret(stored, reports_client_factory):
    client = reports_client_factory(InMemoryCredentialStore({"credentials": stored}))
    with pytest.raises(MissingCredentialsError):
        await client.attach_credentials(build_report_request({}))


@pytest.mark.asyncio
async def test_send_report_posts_payload_to_reports_endpoint(configured_store, reports_client_factory, reporting_service):
    reporting_service.respond("POST", "/reports", 202, {"jobId": "j-1"})
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({"accountId": "acc"}))

    result = await client.send_report_request(payload)

    assert result.ok is True
    assert result.reason is None
    assert result.detail == {"jobId": "j-1"}
    [request] = reporting_service.requests
    assert request.method == "POST"
    assert str(request.url) == "http://x/reports"
    assert json.loads(request.content) == payload.to_wire()


@pytest.mark.asyncio
async def test_send_report_without_credentials_makes_no_network_call(reports_client_factory, reporting_service):
    client = ReportsClient(InMemoryCredentialStore(), transport=reporting_service.transport)
    payload = await reports_client_factory(
        InMemoryCredentialStore({"credentials": CREDENTIALS})
    ).attach_credentials(build_report_request({}))

    result = await client.send_report_request(payload)

    assert result.ok is False
    assert result.reason == FailureReason.MISSING_CREDENTIALS
    assert reporting_service.requests == []


@pytest.mark.asyncio
async def test_send_report_upstream_error_is_a_failed_result(configured_store, reports_client_factory, reporting_service):
    reporting_service.respond("POST", "/reports", 500, {"error": "queue full"})
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({}))

    result = await client.send_report_request(payload)

    assert result.ok is False
    assert result.reason == FailureReason.UPSTREAM_ERROR
    assert result.detail == {"error": "queue full"}


@pytest.mark.asyncio
async def test_send_report_transport_error_is_a_failed_result(configured_store, reports_client_factory, reporting_service):
    reporting_service.fail("POST", "/reports", httpx.ConnectError("Connection refused"))
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({}))

    result = await client.send_report_request(payload)

    assert result.ok is False
    assert result.reason == FailureReason.UPSTREAM_ERROR
    assert "Connection refused" in result.detail


@pytest.mark.asyncio
async def test_send_report_does_not_retry(configured_store, reports_client_factory, reporting_service):
    reporting_service.respond("POST", "/reports", 503, None)
    client = reports_client_factory(configured_store)
    payload = await client.attach_credentials(build_report_request({}))

    await client.send_report_request(payload)

    assert len(reporting_service.requests) == 1


@pytest.mark.asyncio
async def test_list_crons_passes_upstream_body_through(configured_store, reports_client_factory, reporting_service):
    crons = [{"id": "c1", "startAt": "06:00", "mon": True}]
    reporting_service.respond("GET", "/crons/list", 200, crons)
    client = reports_client_factory(configured_store)

    assert await client.list_crons() == crons
    [request] = reporting_service.requests
    assert str(request.url) == "http://x/crons/list"
    assert request.headers["accept"] == "application/json"


@pytest.mark.asyncio
async def test_list_crons_requires_reports_url(reports_client_factory, reporting_service):
    client = reports_client_factory(InMemoryCredentialStore({"credentials": {"apiKey": "k", "apiSecret": "s"}}))
    with pytest.raises(MissingCredentialsError) as exc_info:
        await client.list_crons()
    assert exc_info.value.status_code == 400
    assert reporting_service.requests == []


@pytest.mark.asyncio
async def test_list_crons_upstream_failure(configured_store, reports_client_factory, reporting_service):
    reporting_service.respond("GET", "/crons/list", 502, {"error": "bad gateway"})
    client = reports_client_factory(configured_store)
    with pytest.raises(UpstreamError) as exc_info:
        await client.list_crons()
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == {"error": "bad gateway"}


@pytest.mark.asyncio
async def test_cancel_cron_posts_cron_id(configured_store, reports_client_factory, reporting_service):
    reporting_service.respond("POST", "/crons/cancel", 200, {"cancelled": "c1"})
    client = reports_client_factory(configured_store)

    assert await client.cancel_cron("c1") == {"cancelled": "c1"}
    [request] = reporting_service.requests
    assert str(request.url) == "http://x/crons/cancel"
    assert json.loads(request.content) == {"cronId": "c1"}


@pytest.mark.asyncio
async def test_cancel_cron_checks_cron_id_before_credentials(reports_client_factory):
    client = reports_client_factory(InMemoryCredentialStore())
    with pytest.raises(MissingCronIdError):
        await client.cancel_cron(None)


@pytest.mark.asyncio
async def test_trailing_slash_in_reports_url(reports_client_factory, reporting_service):
    store = InMemoryCredentialStore({"credentials": {**CREDENTIALS, "reportsUrl": "http://x/api/"}})
    client = reports_client_factory(store)
    await client.list_crons()
    assert str(reporting_service.requests[0].url) == "http://x/api/crons/list"


@pytest.mark.asyncio
async def test_stray_whitespace_around_reports_url_is_ignored(reports_client_factory, reporting_service):
    store = InMemoryCredentialStore({"credentials": {**CREDENTIALS, "reportsUrl": " http://x\n"}})
    client = reports_client_factory(store)
    payload = await client.attach_credentials(build_report_request({}))

    result = await client.send_report_request(payload)

    assert result.ok is True
    assert str(reporting_service.requests[0].url) == "http://x/reports"


@pytest.mark.asyncio
async def test_send_report_with_unusable_reports_url_is_a_failed_result(reporting_service):
    store = InMemoryCredentialStore({"credentials": {**CREDENTIALS, "reportsUrl": "http://x\ny"}})
    client = ReportsClient(store, transport=reporting_service.transport)
    payload = await client.attach_credentials(build_report_request({}))

    result = await client.send_report_request(payload)

    assert result.ok is False
    assert result.reason == FailureReason.UPSTREAM_ERROR
    assert reporting_service.requests == []


@pytest.mark.asyncio
async def test_list_crons_with_unusable_reports_url_raises_upstream_error(reporting_service):
    store = InMemoryCredentialStore({"credentials": {**CREDENTIALS, "reportsUrl": "http://x\ny"}})
    client = ReportsClient(store, transport=reporting_service.transport)
    with pytest.raises(UpstreamError):
        await client.list_crons()
