"""Actionable error hierarchy for the pro-match engine.

Errors are classified by **recovery path**, not by origin.
Each error type carries structured guidance for three audiences:
  - The calling code (typed ``error_type`` for routing)
  - The human operator (``suggestion`` + ``troubleshooting`` steps)
  - An AI agent (``ai_guidance`` with concrete next actions)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------


class ErrorType(StrEnum):
    """Recovery-path categories — what to *do*, not where it came from."""

    CONFIG = "config"
    PARSE = "parse"
    VALIDATION = "validation"
    REFERENCE_DATA = "reference_data"
    MATCH = "match"
    UNEXPECTED = "unexpected"


# ---------------------------------------------------------------------------
# Guidance dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AIGuidance:
    """Machine-readable guidance for an AI agent consuming this error."""

    action_required: str
    command: str | None = None
    discovery_tool: str | None = None
    checks: list[str] | None = None
    steps: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"action_required": self.action_required}
        if self.command is not None:
            result["command"] = self.command
        if self.discovery_tool is not None:
            result["discovery_tool"] = self.discovery_tool
        if self.checks is not None:
            result["checks"] = self.checks
        if self.steps is not None:
            result["steps"] = self.steps
        return result


@dataclass(frozen=True)
class Troubleshooting:
    """Sequential, human-readable recovery steps for the operator."""

    steps: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"steps": self.steps}


# ---------------------------------------------------------------------------
# Base actionable error
# ---------------------------------------------------------------------------


@dataclass
class ActionableError(Exception):
    """Structured error with embedded recovery guidance.

    Use the factory classmethods rather than constructing directly —
    they encode domain knowledge so callers don't have to.
    """

    error: str
    error_type: ErrorType
    service: str

    success: bool = field(default=False, init=False)
    suggestion: str | None = None
    ai_guidance: AIGuidance | None = None
    troubleshooting: Troubleshooting | None = None
    context: dict[str, Any] | None = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    # Make it work as a real exception
    def __post_init__(self) -> None:
        super().__init__(self.error)

    # -- serialisation -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Compact JSON-ready dict — ``None`` values are excluded."""
        result: dict[str, Any] = {
            "success": self.success,
            "error": self.error,
            "error_type": self.error_type.value,
            "service": self.service,
            "timestamp": self.timestamp,
        }
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        if self.ai_guidance is not None:
            result["ai_guidance"] = self.ai_guidance.to_dict()
        if self.troubleshooting is not None:
            result["troubleshooting"] = self.troubleshooting.to_dict()
        if self.context is not None:
            result["context"] = self.context
        return result

    # -- factory methods -----------------------------------------------------

    @classmethod
    def config(
        cls,
        field_name: str,
        reason: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Missing or invalid configuration in settings.toml."""
        return cls(
            error=f"Configuration error — {field_name}: {reason}",
            error_type=ErrorType.CONFIG,
            service="settings.toml",
            suggestion=suggestion or f"Fix '{field_name}' in config/settings.toml",
            ai_guidance=AIGuidance(
                action_required=f"Correct the '{field_name}' value in config/settings.toml",
                checks=[
                    "Verify config/settings.toml exists",
                    f"Verify '{field_name}' is present and valid",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    "1. Open config/settings.toml",
                    f"2. Locate the '{field_name}' setting",
                    f"3. Fix the issue: {reason}",
                    "4. Save and re-run",
                ]
            ),
        )

    @classmethod
    def parse(
        cls,
        source: str,
        location: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Input file could not be decoded (TOML or JSON syntax)."""
        return cls(
            error=f"Parse failure in {source} at {location}: {raw_error}",
            error_type=ErrorType.PARSE,
            service=source,
            suggestion=suggestion or f"Fix the syntax of {source}",
            ai_guidance=AIGuidance(
                action_required=f"Repair the syntax of {source}",
                checks=[
                    f"Open {source} and inspect {location}",
                    "Validate the file with a linter for its format",
                ],
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    f"1. Open {source}",
                    f"2. Go to {location}",
                    f"3. Fix the issue: {raw_error}",
                    "4. Re-run the command",
                ]
            ),
        )

    @classmethod
    def validation(
        cls,
        field_name: str,
        reason: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Input validation failure (match data, CLI args, etc.)."""
        return cls(
            error=f"Validation error — {field_name}: {reason}",
            error_type=ErrorType.VALIDATION,
            service="validation",
            suggestion=suggestion or f"Fix '{field_name}': {reason}",
            ai_guidance=AIGuidance(
                action_required=f"Correct the value for '{field_name}'",
            ),
            troubleshooting=Troubleshooting(
                steps=[
                    f"1. Check the value of '{field_name}'",
                    f"2. Issue: {reason}",
                    "3. Correct and retry",
                ]
            ),
        )

    @classmethod
    def missing_reference(
        cls,
        scope: str,
        work_type: str | None = None,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """A requested scope has no score table entry; skipped, not fatal."""
        where = f" for work type '{work_type}'" if work_type else ""
        return cls(
            error=f"Cannot find matching data for scope '{scope}'{where}",
            error_type=ErrorType.REFERENCE_DATA,
            service="scope_tables",
            suggestion=suggestion or f"Add a score table entry for '{scope}'",
            ai_guidance=AIGuidance(
                action_required=f"Publish score marks for scope '{scope}'",
                checks=[
                    "Is the scope identifier spelled the same as in the reference data?",
                    "Was the reference data synced after the scope was introduced?",
                ],
            ),
            context={"scope": scope, "work_type": work_type},
        )

    @classmethod
    def compatibility(
        cls,
        code: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """No personality compatibility row matches a code (table defect)."""
        return cls(
            error=f"No personality compatibility row matches '{code}'",
            error_type=ErrorType.CONFIG,
            service="personality_table",
            suggestion=suggestion or "The static personality table is incomplete; restore all 16 rows",
            ai_guidance=AIGuidance(
                action_required="Repair the personality compatibility table",
                command="python -m promatch tables",
                checks=[
                    "Does the table hold exactly 16 canonical keys?",
                    f"Is '{code}' a code with one trait per axis?",
                ],
            ),
        )

    @classmethod
    def match(
        cls,
        project_id: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Opaque failure of a whole match computation; no partial results."""
        return cls(
            error="Match computation failed",
            error_type=ErrorType.MATCH,
            service="matching",
            suggestion=suggestion or "Check the logs for the underlying cause and re-run the match",
            ai_guidance=AIGuidance(
                action_required="Inspect the chained cause and fix the input data",
                checks=[
                    "Is the project's priority ranking a permutation of 1..3?",
                    "Are all provider-type marks two characters (A/C/T/D + 1..3)?",
                    "Does the project's personality code have one trait per axis?",
                ],
            ),
            context={"project_id": project_id, "cause": raw_error},
        )

    @classmethod
    def unexpected(
        cls,
        service: str,
        operation: str,
        raw_error: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Catch-all for truly unexpected failures."""
        return cls(
            error=f"Unexpected error in {service} during {operation}: {raw_error}",
            error_type=ErrorType.UNEXPECTED,
            service=service,
            suggestion=suggestion or "This is an unexpected error — check logs for details",
            ai_guidance=AIGuidance(
                action_required="Analyze the error and escalate if needed",
                checks=[
                    "Check the full traceback in logs",
                    f"Is {service} in a known-good state?",
                ],
            ),
        )

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        service: str,
        operation: str,
        *,
        suggestion: str | None = None,
    ) -> ActionableError:
        """Classify an arbitrary exception.

        ``ActionableError`` instances pass through unchanged.  A
        caller-supplied ``suggestion`` is always preserved.
        """
        if isinstance(error, ActionableError):
            return error

        raw_error = str(error)
        if isinstance(error, (KeyError, ValueError, TypeError)):
            return cls.validation(
                f"{service}.{operation}",
                raw_error or type(error).__name__,
                suggestion=suggestion,
            )
        return cls.unexpected(service, operation, raw_error, suggestion=suggestion)
