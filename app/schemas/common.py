from datetime import date, datetime
from typing import Annotated, ClassVar, FrozenSet, Literal, Union

from pydantic import AfterValidator, BaseModel, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.utils.time import to_naive_utc, truncate_to_day

Priority = Literal["low", "medium", "high"]
TaskStatus = Literal["todo", "in-progress", "done"]
Timeframe = Literal["long-term", "monthly", "weekly", "daily"]
IntegrationType = Literal["google_calendar", "todoist", "gmail"]
SyncStatus = Literal["inactive", "active", "error"]

# Stored and returned as naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
# Any date or datetime, truncated to its calendar day
PlanDay = Annotated[Union[datetime, date], AfterValidator(truncate_to_day)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class RequestModel(CamelModel):
    """Request bodies reject keys they do not declare."""

    model_config = {**CamelModel.model_config, "extra": "forbid"}


class ErrorResponse(BaseModel):
    error: str
    detail: str
    field: Union[str, None] = None


class PatchModel(RequestModel):
    """Partial update: only keys present in the body are applied.

    ``null`` is accepted only for the fields listed in ``nullable_fields``.
    """

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @field_validator("*")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None and info.field_name not in cls.nullable_fields:
            raise ValueError("may not be null")
        return value
