"""Client for the external reporting service.

Every call reads the stored credentials first: ``reportsUrl`` addresses the
service, ``apiKey``/``apiSecret`` travel inside the report payload. No retries
and no explicit timeouts are applied; httpx defaults govern the transport."""
import logging
from typing import Annotated, Any, Dict, Optional

import httpx
from fastapi import Depends

from ...core.config import CREDENTIALS_KEY
from ..credentials.store import CredentialStore, get_credential_store
from .errors import MissingCredentialsError, MissingCronIdError, UpstreamError
from .schemas import FailureReason, OutboundPayload, ReportRequest, SendResult

logger = logging.getLogger(__name__)


def _response_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ReportsClient:
    def __init__(self, store: CredentialStore, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.store = store
        self.transport = transport
        self.headers = {"Accept": "application/json"}

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    async def _credentials(self) -> Dict[str, str]:
        return await self.store.get_all(CREDENTIALS_KEY) or {}

    async def _reports_url(self) -> str:
        credentials = await self._credentials()
        reports_url = (credentials.get("reportsUrl") or "").strip()
        if not reports_url:
            raise MissingCredentialsError("Reports URL not configured")
        return reports_url.rstrip("/")

    async def attach_credentials(self, request: ReportRequest) -> OutboundPayload:
        credentials = await self._credentials()
        if not credentials.get("apiKey") or not credentials.get("apiSecret"):
            raise MissingCredentialsError("Missing stored credentials")
        return OutboundPayload.model_validate(
            {
                **request.model_dump(),
                "api_key": credentials["apiKey"],
                "api_secret": credentials["apiSecret"],
            }
        )

    async def send_report_request(self, payload: OutboundPayload) -> SendResult:
        """POSTs the payload to ``{reportsUrl}/reports``. Never raises; see ``SendResult``."""
        try:
            reports_url = await self._reports_url()
        except MissingCredentialsError as e:
            logger.error(f"Not sending report request: {e.message}")
            return SendResult.failure(FailureReason.MISSING_CREDENTIALS, e.message)

        url = f"{reports_url}/reports"
        logger.info(f"Sending report request to {url}")
        try:
            async with self._http() as client:
                r = await client.post(url, json=payload.to_wire(), headers=self.headers)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _response_detail(e.response)
            logger.error(f"Error sending report request: {detail or e}")
            return SendResult.failure(FailureReason.UPSTREAM_ERROR, detail or str(e))
        except httpx.HTTPError as e:
            logger.error(f"Error sending report request: {e!r}")
            return SendResult.failure(FailureReason.UPSTREAM_ERROR, str(e) or repr(e))
        except httpx.InvalidURL as e:
            logger.error(f"Invalid reports URL {url!r}: {e}")
            return SendResult.failure(FailureReason.UPSTREAM_ERROR, str(e))

        body = _response_detail(r)
        logger.info("Report request sent successfully")
        logger.debug(f"Reporting service answered: {body}")
        return SendResult.success(body)

    async def list_crons(self) -> Any:
        reports_url = await self._reports_url()
        return await self._request_json("GET", f"{reports_url}/crons/list")

    async def cancel_cron(self, cron_id: Optional[str]) -> Any:
        if not cron_id:
            raise MissingCronIdError("Missing cronId")
        reports_url = await self._reports_url()
        return await self._request_json("POST", f"{reports_url}/crons/cancel", json={"cronId": cron_id})

    async def _request_json(self, method: str, url: str, **kwargs) -> Any:
        try:
            async with self._http() as client:
                r = await client.request(method, url, headers=self.headers, **kwargs)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(str(e), detail=_response_detail(e.response)) from e
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or repr(e)) from e
        except httpx.InvalidURL as e:
            raise UpstreamError(str(e)) from e
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}") from e


def get_reports_client(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> ReportsClient:
    return ReportsClient(store)
