"""Report endpoints for the operator dashboard

Report submission and scheduled report (cron) management. Everything here is
forwarded to the external reporting service configured through the
credentials feature, and every route requires an authenticated user."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...common.forms import read_body
from ..auth.security import get_current_active_user
from . import service as report_service
from .client import ReportsClient, get_reports_client
from .errors import ReportsServiceError
from .schemas import CancelCronRequest, ReportSubmissionResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Reports"],
    dependencies=[Depends(get_current_active_user)],
)


@router.post("/reports", response_model=ReportSubmissionResponse)
async def submit_report(
    request: Request,
    client: Annotated[ReportsClient, Depends(get_reports_client)],
):
    """Accepts the report form as url-encoded/multipart fields or as JSON."""
    raw = await read_body(request)
    try:
        result = await report_service.submit_report(raw, client)
    except Exception as e:
        logger.error(f"Report submission failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected error",
        )
    if result.ok:
        return ReportSubmissionResponse(ok=True, message="Report generated")
    return ReportSubmissionResponse(ok=False, message="Error generating report", reason=result.reason)


@router.get("/crons/list")
async def list_crons(client: Annotated[ReportsClient, Depends(get_reports_client)]):
    try:
        return await client.list_crons()
    except ReportsServiceError as e:
        logger.error(f"Error fetching crons list: {e.message}")
        raise _http_error(e, "Error fetching crons list")


@router.post("/crons/cancel")
async def cancel_cron(
    request: Request,
    client: Annotated[ReportsClient, Depends(get_reports_client)],
):
    body = CancelCronRequest.model_validate(await read_body(request))
    try:
        return await client.cancel_cron(body.cron_id)
    except ReportsServiceError as e:
        logger.error(f"Error cancelling cron {body.cron_id}: {e.message}")
        raise _http_error(e, "Error cancelling cron")


def _http_error(error: ReportsServiceError, upstream_message: str) -> HTTPException:
    if error.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=error.status_code, detail={"message": error.message})
    return HTTPException(
        status_code=error.status_code,
        detail={"message": upstream_message, "error": error.message},
    )
