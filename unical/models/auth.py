"""
Authentication value objects.

Auth values are immutable: a refresh produces a new Auth and the
credential-updated notification carries that new value.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from unical.exceptions import ValidationError

REQUIRED_AUTH_FIELDS = ("access_token", "refresh_token", "expiration_date")


class CredentialUpdate(BaseModel):
    """Payload of the credential-updated notification."""

    access_token: str
    refresh_token: str
    expiration_date: str
    id: Optional[Any] = None


class Auth(BaseModel):
    """
    Per-request OAuth credentials.

    Attributes:
        access_token: Current access token
        refresh_token: Token used to obtain new access tokens
        expiration_date: When the access token expires (UTC if naive)
        id: Opaque caller identifier echoed back on credential updates
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    expiration_date: datetime
    id: Optional[Any] = None

    @field_validator("expiration_date")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def coerce(cls, value: Union["Auth", Mapping[str, Any], None]) -> "Auth":
        """
        Build an Auth from an Auth instance or a mapping.

        Raises:
            ValidationError: If a required field is missing, empty or malformed
        """
        if isinstance(value, Auth):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(
                "Authentication object is missing properties: "
                + ", ".join(REQUIRED_AUTH_FIELDS)
            )

        missing = [name for name in REQUIRED_AUTH_FIELDS if not value.get(name)]
        if missing:
            raise ValidationError(
                f"Authentication object is missing properties: {', '.join(missing)}"
            )

        try:
            return cls.model_validate(dict(value))
        except PydanticValidationError as e:
            raise ValidationError(
                f"Authentication object is malformed: {e}",
                original_error=e,
            )

    def time_remaining(self, now: Optional[datetime] = None) -> timedelta:
        """Time left until the access token expires (negative once expired)."""
        now = now or datetime.now(timezone.utc)
        return self.expiration_date - now

    def to_credential_update(self) -> CredentialUpdate:
        return CredentialUpdate(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expiration_date=self.expiration_date.isoformat(),
            id=self.id,
        )
