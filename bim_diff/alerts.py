"""Owner alerts for high-severity structural changes.

The classifier never notifies anyone. Callers that want an alert pass the
report here together with a notifier, any callable taking a ``CriticalAlert``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging

from .critical import CriticalChangeReport, Severity

logger = logging.getLogger(__name__)


@dataclass
class CriticalAlert:
    """Notification payload for an owner."""

    title: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"title": self.title, "content": self.content}


Notifier = Callable[[CriticalAlert], Any]


def build_critical_alert(
    report: CriticalChangeReport,
    old_name: str = "Old model",
    new_name: str = "New model",
) -> CriticalAlert:
    """Format an alert from a critical change report."""
    summary = report.summary
    lines = [
        f"{summary.high_severity} high-severity critical changes were detected in the comparison:",
        "",
        f"Old model: {old_name}",
        f"New model: {new_name}",
        "",
        "Critical change summary:",
        f"- High severity: {summary.high_severity}",
        f"- Medium severity: {summary.medium_severity}",
        f"- Low severity: {summary.low_severity}",
    ]

    high = [c for c in report.critical_changes if c.severity == Severity.HIGH]
    if high:
        lines.append("")
        lines.append("High-severity changes:")
        for change in high:
            lines.append(f"- {change.description} [{change.global_id or change.express_id}]")

    lines.append("")
    lines.append("Review the full comparison before approving the new version.")

    return CriticalAlert(
        title="Critical changes detected in model comparison",
        content="\n".join(lines),
    )


def notify_on_high_severity(
    report: CriticalChangeReport,
    notifier: Notifier,
    old_name: str = "Old model",
    new_name: str = "New model",
) -> Optional[CriticalAlert]:
    """
    Send an alert when the report holds high-severity changes.

    Args:
        report: Critical change report
        notifier: Callable receiving the alert
        old_name: Display name of the old model
        new_name: Display name of the new model

    Returns:
        The alert that was sent, or None
    """
    if report.summary.high_severity <= 0:
        return None

    alert = build_critical_alert(report, old_name, new_name)
    logger.info("Sending critical change alert (%d high severity)", report.summary.high_severity)
    notifier(alert)
    return alert
