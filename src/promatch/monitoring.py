"""Missing reference data notifications.

When a project asks for a scope that has no score table entry, matching
carries on without it and tells monitoring once.  The sink is
fire-and-forget: nothing it returns is used, and a failing sink must
never fail the match it is reporting on.
"""

from __future__ import annotations

import logging
from typing import Protocol

from promatch.errors import ActionableError

logger = logging.getLogger(__name__)


class MissingScopeReporter(Protocol):
    """One-way notification sink for missing scope data."""

    def report(self, error: ActionableError) -> None: ...


class LoggingReporter:
    """Default sink: writes the notification to the log at WARNING."""

    def report(self, error: ActionableError) -> None:
        logger.warning("%s", error.error)


class CollectingReporter:
    """Keeps notifications in memory, e.g. to print them after a CLI run."""

    def __init__(self) -> None:
        self.reported: list[ActionableError] = []

    def report(self, error: ActionableError) -> None:
        self.reported.append(error)

    @property
    def scopes(self) -> list[str]:
        return [str((e.context or {}).get("scope")) for e in self.reported]


def notify_missing_scope(
    reporter: MissingScopeReporter,
    scope: str,
    work_type: str | None = None,
) -> None:
    """Send one missing-scope notification, logging (not raising) sink failures."""
    error = ActionableError.missing_reference(scope, work_type)
    try:
        reporter.report(error)
    except Exception:
        logger.exception("Monitoring sink failed while reporting missing scope '%s'", scope)
