"""
Report Submission Service

Builds the report request from raw form fields, attaches the stored
credentials and forwards it to the reporting service. The outcome is always a
``SendResult``: a missing configuration and an upstream failure are both
expected results that callers branch on through ``reason``.
"""
import json
import logging
from typing import Any, Mapping

from .client import ReportsClient
from .errors import MissingCredentialsError
from .payload import build_report_request
from .schemas import FailureReason, OutboundPayload, SendResult

logger = logging.getLogger(__name__)

REDACTED = "***"


def redacted_wire(payload: OutboundPayload) -> dict:
    wire = payload.to_wire()
    wire["apiSecret"] = REDACTED
    return wire


async def submit_report(raw: Mapping[str, Any], client: ReportsClient) -> SendResult:
    """
    Submits one report request.

    Args:
        raw: Form or JSON fields as posted by the dashboard. List-or-scalar
            fields are accepted in either shape.
        client: Client bound to the credential store.

    Returns:
        SendResult: ``ok`` when the reporting service accepted the request,
            otherwise the failure reason and whatever detail is available.
    """
    request = build_report_request(raw)
    try:
        payload = await client.attach_credentials(request)
    except MissingCredentialsError as e:
        logger.warning(f"Report not sent: {e.message}")
        return SendResult.failure(FailureReason.MISSING_CREDENTIALS, e.message)

    logger.debug("Final JSON payload to send:\n%s", json.dumps(redacted_wire(payload), indent=2))
    return await client.send_report_request(payload)
