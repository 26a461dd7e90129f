"""Alert and service records."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator

# Range queries compare timestamps as strings, which only orders correctly for
# RFC3339 values sharing one precision and timezone designator.
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def is_rfc3339(value: str) -> bool:
    return bool(RFC3339_PATTERN.fullmatch(value))


def require_rfc3339(value: str, field: str = "timestamp") -> str:
    if not is_rfc3339(value):
        raise ValueError(f"{field} must be an RFC3339 date-time, got {value!r}")
    return value


class ServiceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_id: str
    service_name: str


class AlertRecord(BaseModel):
    """A single stored alert. Records are never modified after submission."""

    model_config = ConfigDict(frozen=True)

    alert_id: str
    service_id: str
    model: str
    alert_type: str
    alert_ts: str
    severity: str
    team_slack: str


class AlertSubmission(AlertRecord):
    """Submission payload: an alert plus the name of the service it belongs to."""

    service_name: str

    @field_validator("alert_ts")
    @classmethod
    def _check_alert_ts(cls, value: str) -> str:
        return require_rfc3339(value, "alert_ts")

    def to_record(self) -> AlertRecord:
        return AlertRecord(**self.model_dump(exclude={"service_name"}))

