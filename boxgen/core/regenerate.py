"""
Regeneration cycle — validate, then build, keeping the last good model.

Each call is one cycle over a single ParameterSet snapshot:

  INVALID  validation errors; nothing is built, the previous model stays
  FAILED   validation passed but solid construction raised; the previous
           model stays and the user sees "Geometry generation failed."
  UPDATED  the new assembly replaces the previous one

No other state is carried between calls.  The kept (params, assembly)
pair is swapped as one unit under a lock, so concurrent callers never
see a mismatched pair.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

from boxgen.pipeline.params import ParameterSet
from boxgen.pipeline.validation import ValidationResult, validate_params
from boxgen.scad.builder import Assembly, GenerationError, build_assembly

log = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Geometry generation failed."


class RegenStatus(Enum):
    UPDATED = "updated"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class RegenOutcome:
    status: RegenStatus
    validation: ValidationResult
    assembly: Assembly | None = None     # the model now on display
    message: str = ""
    errors: list[str] = field(default_factory=list)

    @property
    def updated(self) -> bool:
        return self.status is RegenStatus.UPDATED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "errors": list(self.errors),
            "warnings": list(self.validation.warnings),
            "has_model": self.assembly is not None,
        }


class Regenerator:
    """Holds the last valid parameters and assembly."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: tuple[ParameterSet | None, Assembly | None] = (None, None)

    def snapshot(self) -> tuple[ParameterSet | None, Assembly | None]:
        """The last valid (params, assembly) pair."""
        with self._lock:
            return self._state

    @property
    def params(self) -> ParameterSet | None:
        return self.snapshot()[0]

    @property
    def assembly(self) -> Assembly | None:
        return self.snapshot()[1]

    def regenerate(self, params: ParameterSet) -> RegenOutcome:
        result = validate_params(params)
        if not result.valid:
            log.info("Regeneration skipped: %d validation error(s)", len(result.errors))
            return RegenOutcome(
                status=RegenStatus.INVALID,
                validation=result,
                assembly=self.assembly,
                message=result.errors[0],
                errors=list(result.errors),
            )

        try:
            assembly = build_assembly(params)
        except GenerationError as e:
            log.warning("%s", e)
            return RegenOutcome(
                status=RegenStatus.FAILED,
                validation=result,
                assembly=self.assembly,
                message=GENERATION_FAILED_MESSAGE,
                errors=[GENERATION_FAILED_MESSAGE],
            )

        with self._lock:
            self._state = (params, assembly)
        message = "Model updated."
        if result.warnings:
            message = f"Model updated with {len(result.warnings)} warning(s)."
        return RegenOutcome(
            status=RegenStatus.UPDATED,
            validation=result,
            assembly=assembly,
            message=message,
        )
