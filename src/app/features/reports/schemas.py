"""Report Request Schemas

This module defines the Pydantic models for the report requests forwarded to
the external reporting service. It includes schemas for:

1. The weekly cron specification
2. The report job (filter, grouping and aggregations)
3. The normalized report request and the outbound payload with credentials
4. Results and API responses for submission and cron proxying

Field names are snake_case in Python and camelCase on the wire (aliases), except
``include_subaccounts`` and ``include_messages`` which the upstream API expects
verbatim. Wire dumps drop absent values."""
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CronSpec(WireModel):
    start_at: Optional[Any] = Field(None, alias="startAt")
    mon: bool = False
    tue: bool = False
    wed: bool = False
    thu: bool = False
    fri: bool = False
    sat: bool = False
    sun: bool = False


class Aggregation(WireModel):
    type: Any
    field: Any
    label: Any


class FilterClause(WireModel):
    field: str
    type: str
    operator: str
    value: str
    options: Optional[str] = None


class FilterConfig(WireModel):
    logic: str = "AND"
    filters: List[FilterClause]


class GroupBy(WireModel):
    name: Optional[Any] = None
    fields: List[str] = Field(default_factory=list)


class ReportJob(WireModel):
    filter_config: FilterConfig = Field(..., alias="filterConfig")
    group_by: List[GroupBy] = Field(..., alias="groupBy")
    aggregations: List[Aggregation] = Field(default_factory=list)


class ReportRequest(WireModel):
    account_id: Optional[Any] = Field(None, alias="accountId")
    start_date: Optional[Any] = Field(None, alias="startDate")
    end_date: Optional[Any] = Field(None, alias="endDate")
    product: Optional[Any] = None
    direction: Optional[Any] = None
    include_subaccounts: bool = False
    include_messages: bool = False
    email_to: Optional[Any] = Field(None, alias="emailTo")
    cron: CronSpec
    report_job: ReportJob = Field(..., alias="reportJob")


class OutboundPayload(ReportRequest):
    api_key: str = Field(..., alias="apiKey")
    api_secret: str = Field(..., alias="apiSecret")


class FailureReason(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    UPSTREAM_ERROR = "upstream_error"


class SendResult(BaseModel):
    """Outcome of forwarding a report request. A failure is an expected result, not an error."""
    ok: bool
    reason: Optional[FailureReason] = None
    detail: Any = None

    @classmethod
    def success(cls, detail: Any = None) -> "SendResult":
        return cls(ok=True, detail=detail)

    @classmethod
    def failure(cls, reason: FailureReason, detail: Any = None) -> "SendResult":
        return cls(ok=False, reason=reason, detail=detail)


class ReportSubmissionResponse(BaseModel):
    ok: bool
    message: str
    reason: Optional[FailureReason] = None


class CancelCronRequest(BaseModel):
    cron_id: Optional[Any] = Field(None, alias="cronId")

    model_config = ConfigDict(populate_by_name=True)
