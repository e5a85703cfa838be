"""
Request parameters and options accepted by connector operations.

Callers may pass the camelCase keys of the unified contract (``calendarId``,
``pageToken``, ``from``...) or the snake_case field names.
"""

from datetime import datetime
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from unical.exceptions import ValidationError

_M = TypeVar("_M", bound="_Coercible")


class _Coercible(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @classmethod
    def coerce(cls: type[_M], value: Union[_M, Mapping[str, Any], None]) -> _M:
        """
        Build an instance from None, a mapping or an instance.

        Raises:
            ValidationError: If the value has the wrong type or malformed fields
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(
                f"{cls.__name__} must be a mapping, got {type(value).__name__}"
            )
        try:
            return cls.model_validate(dict(value))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {cls.__name__}: {e}", original_error=e)


class RequestParams(_Coercible):
    """Query parameters of a connector operation."""

    calendar_id: Optional[str] = Field(None, alias="calendarId")
    event_id: Optional[str] = Field(None, alias="eventId")
    channel_id: Optional[str] = Field(None, alias="channelId")
    callback_url: Optional[str] = Field(None, alias="callbackUrl")
    time_zone: Optional[str] = Field(None, alias="timeZone")
    from_date: Optional[datetime] = Field(None, alias="from")
    to_date: Optional[datetime] = Field(None, alias="to")
    last_modified: Optional[datetime] = Field(None, alias="lastModified")
    page_token: Optional[str] = Field(None, alias="pageToken")
    max_results: Optional[int] = Field(None, alias="maxResults")


class RequestOptions(_Coercible):
    """Behavior switches of a connector operation."""

    raw: bool = Field(
        False,
        description="Return the upstream payload instead of unified resources",
    )
    callback_secret: Optional[str] = Field(
        None,
        alias="callbackSecret",
        description="Secret delivered with push notifications (watch channels)",
    )
