"""Status accumulator shared by every save and load stage."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

Severity = str

WARNING: Severity = "WARNING"
FAILURE: Severity = "ERROR"


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


@dataclass
class SaveReport:
    """Ordered issues of one save or load call.

    A single failure makes the whole call unsuccessful; stages that start
    afterwards check ``ok`` and do nothing.
    """

    operation: str = "save"
    issues: List[Issue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(issue.severity == FAILURE for issue in self.issues)

    def warn(self, code: str, message: str, **context: object) -> Issue:
        return self._record(WARNING, code, message, context)

    def fail(self, code: str, message: str, **context: object) -> Issue:
        return self._record(FAILURE, code, message, context)

    def warnings(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    def failures(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == FAILURE]

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def _record(self, severity: Severity, code: str, message: str, context: dict) -> Issue:
        issue = Issue(
            severity=severity,
            code=code,
            message=message,
            context={key: str(value) for key, value in context.items()},
        )
        self.issues.append(issue)
        level = logging.ERROR if severity == FAILURE else logging.WARNING
        logger.log(level, "%s: %s", self.operation, format_issue(issue))
        return issue
