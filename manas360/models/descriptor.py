"""Inbound session descriptor submitted by the scheduling form."""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class SessionDescriptor(BaseModel):
    """Partial session as collected by the scheduling form.

    The ``kind`` field selects which of the type-specific fields are
    required. ``start_time`` defaults to now and naive values are read as UTC.
    """
    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    kind: Literal["individual", "group", "vr"] = "individual"
    patient_name: Optional[str] = None
    theme_slug: Optional[str] = None
    vr_environment_id: Optional[str] = None
    modules: List[str] = Field(default_factory=list)
    start_time: Optional[datetime] = None
    duration_minutes: int = Field(default=60, gt=0, strict=True)
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("notes", "patient_name", "theme_slug", "vr_environment_id")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def _check_fields_for_kind(self) -> "SessionDescriptor":
        if self.kind == "group":
            if not self.theme_slug:
                raise ValueError("group sessions require a theme")
            if self.patient_name:
                raise ValueError("group sessions do not take a patient name")
        else:
            if not self.patient_name:
                raise ValueError(f"{self.kind} sessions require a patient name")
            if self.theme_slug:
                raise ValueError(f"{self.kind} sessions do not take a theme")

        if self.kind == "vr":
            if not self.vr_environment_id:
                raise ValueError("vr sessions require an environment")
        elif self.vr_environment_id or self.modules:
            raise ValueError(f"{self.kind} sessions do not take a VR environment or modules")
        return self
