# ─────────────────────────────────────────────────────────────────
# models.py — Data Models (Pydantic Schemas)
#
# The JSON contract uses camelCase ("deviceStatus", "userName")
# because the dashboard that consumes it is JavaScript. In Python
# we keep snake_case attributes and let Pydantic translate:
#   - alias_generator=to_camel → "device_status" ↔ "deviceStatus"
#   - populate_by_name=True    → either spelling is accepted on input
#   - model_dump(by_alias=True) → camelCase on output
#
# SEPARATION OF CONCERNS:
# All data shapes live here. If the API contract changes
# (e.g. adding a new field), we only update THIS file.
# ─────────────────────────────────────────────────────────────────

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from errors import ValidationError


class LogRecord(BaseModel):
    """
    One observation of the device, written every poll interval.

    {
        "time": "2026-03-01T16:04:22+05:30",
        "data": {"key": "-Nx81...", "voltage": 229.4},
        "deviceStatus": true
    }

    `data` is the raw Firebase tree — we don't enforce any schema on it.
    Records are frozen: once logged, they never change.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    time: str
    data: Any
    device_status: bool

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class User(BaseModel):
    """
    Shape of the JSON body for POST /addUser

    {
        "userName": "Nimal",
        "accountNumber": "0012345",
        "device": "PM-01",
        "address": "Colombo 07",
        "tp": "0771234567",
        "userId": "u-1"
    }

    All six fields are required and must not be null. Values are
    stored exactly as sent (a phone number may arrive as a string or
    a number — we don't care). Duplicates are allowed.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    user_name: Any
    account_number: Any
    device: Any
    address: Any
    tp: Any
    user_id: Any

    @classmethod
    def required_fields(cls) -> List[str]:
        """The wire (camelCase) names of every required field."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    @classmethod
    def from_payload(cls, payload: Any) -> "User":
        """
        Builds a User from a decoded JSON body.

        Raises errors.ValidationError if the body isn't an object or
        any required field is absent or null. Unknown keys are dropped.
        """

        if not isinstance(payload, dict):
            raise ValidationError(missing=cls.required_fields())

        missing = [name for name in cls.required_fields() if payload.get(name) is None]
        if missing:
            raise ValidationError(missing=missing)

        return cls.model_validate({name: payload[name] for name in cls.required_fields()})

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class AddUserResponse(BaseModel):
    """Response body for a successful POST /addUser."""

    success: bool
    user: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
