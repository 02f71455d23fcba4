from __future__ import annotations

"""Pydantic models for scripted demo sequences.

A sequence is an optional configuration patch plus an ordered list of events:

    {
      "config": {"temperament": ..., "root": ..., "scale": ...,
                 "fifths": ..., "chromaticColors": ...},
      "events": [{"notes": ["C", "E", "G"], "duration": 1000, "sustain": 800}]
    }

Unset config fields mean "leave that aspect of the session alone".
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import MalformedSequence

DEFAULT_DURATION_MS = 1500
DEFAULT_SUSTAIN_FRACTION = 0.8

NoteSpec = Union[int, str]


class SequenceConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    temperament: Optional[str] = None
    root: Optional[str] = None
    scale: Optional[str] = None
    fifths: Optional[bool] = None
    chromatic_colors: Optional[bool] = Field(default=None, alias="chromaticColors")

    def patch(self) -> Dict[str, Any]:
        """Only the keys that were actually set."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.patch()


class SequenceEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notes: List[NoteSpec]
    duration: int = Field(default=DEFAULT_DURATION_MS, gt=0)
    sustain: Optional[int] = Field(default=None, ge=0)

    @field_validator("notes")
    @classmethod
    def _no_blank_notes(cls, v: List[NoteSpec]) -> List[NoteSpec]:
        for n in v:
            if isinstance(n, str) and not n.strip():
                raise ValueError("note specifications must not be blank")
        return v

    @property
    def effective_sustain(self) -> float:
        """Release time; an unset or zero sustain means 80% of the duration."""
        if self.sustain:
            return float(self.sustain)
        return self.duration * DEFAULT_SUSTAIN_FRACTION


class Sequence(BaseModel):
    model_config = ConfigDict(extra="forbid")

    config: SequenceConfig = Field(default_factory=SequenceConfig)
    events: List[SequenceEvent] = Field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_sequence(obj: Union[Sequence, Dict[str, Any]]) -> Sequence:
    """Validate the structured object form.

    Raises:
        MalformedSequence: wraps pydantic validation errors.
    """
    if isinstance(obj, Sequence):
        return obj
    try:
        return Sequence.model_validate(obj)
    except ValidationError as e:
        raise MalformedSequence(f"Invalid sequence object: {e}") from e
