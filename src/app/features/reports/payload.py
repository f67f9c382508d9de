"""Report Payload Builder

Turns the raw fields of the report form into a ``ReportRequest``. Form
submissions deliver some fields either as a single value or as a list
(repeated inputs), so those are normalized to lists first and every step
after that works on lists only.

There is no validation layer here: missing scalars are left out of the
payload and mismatched aggregation lists are truncated silently. Failures
surface later, when credentials are attached or the upstream call is made."""
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .schemas import (
    Aggregation, CronSpec, FilterClause, FilterConfig, GroupBy, ReportJob, ReportRequest
)

DAY_CODES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

ARRAY_FIELDS = ("aggregationType", "aggregationField", "aggregationLabel", "cronDays")

SCALAR_FIELDS = {
    "accountId": "account_id",
    "startDate": "start_date",
    "endDate": "end_date",
    "product": "product",
    "direction": "direction",
    "emailTo": "email_to",
}

# Service sessions are never part of a report
SESSION_TYPE_FILTER = FilterClause(
    field="session_type",
    type="text",
    operator="regex",
    value="^(?!service$).*",
    options="i",
)


def normalize_array(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if value:
        return [value]
    return []


def coerce_bool(value: Any) -> bool:
    """Only the literal string ``"true"`` counts; a real ``True`` does not."""
    return isinstance(value, str) and value == "true"


def first_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def split_group_by_fields(value: Any) -> List[str]:
    if not value:
        return []
    return [f.strip() for f in str(value).split(",") if f.strip()]


def zip_aggregations(
    types: Sequence[Any], fields: Sequence[Any], labels: Sequence[Any]
) -> List[Aggregation]:
    """Pairs the three lists by position.

    The type list drives the iteration. A position is kept only when all three
    values are present and non-empty, so shorter field or label lists drop the
    trailing entries.
    """
    aggregations = []
    for i, agg_type in enumerate(types):
        field = fields[i] if i < len(fields) else None
        label = labels[i] if i < len(labels) else None
        if agg_type and field and label:
            aggregations.append(Aggregation(type=agg_type, field=field, label=label))
    return aggregations


def cron_flags(days: Iterable[Any], start_at: Optional[Any] = None) -> CronSpec:
    selected = list(days)
    return CronSpec(start_at=start_at, **{code: code in selected for code in DAY_CODES})


def build_report_request(raw: Mapping[str, Any]) -> ReportRequest:
    arrays = {name: normalize_array(raw.get(name)) for name in ARRAY_FIELDS}
    scalars = {attr: first_value(raw.get(name)) for name, attr in SCALAR_FIELDS.items()}

    report_job = ReportJob(
        filter_config=FilterConfig(logic="AND", filters=[SESSION_TYPE_FILTER.model_copy()]),
        group_by=[
            GroupBy(
                name=first_value(raw.get("groupByName")),
                fields=split_group_by_fields(first_value(raw.get("groupByFields"))),
            )
        ],
        aggregations=zip_aggregations(
            arrays["aggregationType"], arrays["aggregationField"], arrays["aggregationLabel"]
        ),
    )
    return ReportRequest(
        **scalars,
        include_subaccounts=coerce_bool(raw.get("include_subaccounts")),
        include_messages=coerce_bool(raw.get("include_messages")),
        cron=cron_flags(arrays["cronDays"], start_at=first_value(raw.get("cron_time"))),
        report_job=report_job,
    )
