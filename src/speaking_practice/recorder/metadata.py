from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class FormFields:
    """What the student typed into the recording form."""

    name: str = ""
    id: str = ""
    klass: str = ""


class SessionMetadata(BaseModel):
    """Immutable description of one completed recording."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    id: str = ""
    klass: str = ""
    unit: str = ""
    prompt: str = ""
    timestamp_iso: str
    duration_sec: int = Field(ge=0)

    @classmethod
    def capture(
        cls,
        form: FormFields,
        *,
        unit: str,
        prompt: str,
        duration_sec: int,
        moment: Optional[datetime] = None,
    ) -> "SessionMetadata":
        return cls(
            name=form.name.strip(),
            id=form.id.strip(),
            klass=form.klass.strip(),
            unit=unit,
            prompt=prompt.strip(),
            timestamp_iso=iso_timestamp(moment),
            duration_sec=duration_sec,
        )

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent)
