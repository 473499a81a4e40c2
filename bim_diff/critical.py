"""Severity classification of changes to structural elements."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .diff import ChangeType, ComparisonResult, ElementChange, PropertyChange

DEFAULT_CRITICAL_TYPES = (
    "IfcWall",
    "IfcWallStandardCase",
    "IfcColumn",
    "IfcBeam",
    "IfcSlab",
    "IfcFooting",
    "IfcPile",
    "IfcRoof",
)

# Matched case-insensitively as substrings of the property name.
DEFAULT_CRITICAL_PROPERTY_KEYS = (
    "loadbearing",
    "isexternal",
    "thickness",
    "width",
    "height",
    "length",
    "depth",
    "area",
    "volume",
    "material",
    "structuraltype",
)


class Severity(Enum):
    """Severity of a change to a critical element."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


@dataclass
class CriticalChangeConfig:
    """Configuration for critical change detection."""

    critical_types: Sequence[str] = DEFAULT_CRITICAL_TYPES
    critical_property_keys: Sequence[str] = DEFAULT_CRITICAL_PROPERTY_KEYS
    exact_type_match: bool = False
    max_critical_changes: int = 100


@dataclass
class CriticalChange:
    """A change to an element of a critical type."""

    express_id: Optional[int]
    type: str
    change_type: ChangeType
    severity: Severity
    description: str
    global_id: Optional[str] = None
    name: Optional[str] = None
    property_changes: Optional[List[PropertyChange]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "expressId": self.express_id,
            "type": self.type,
            "globalId": self.global_id,
            "changeType": self.change_type.value,
            "severity": self.severity.value,
            "description": self.description,
        }
        if self.name is not None:
            data["name"] = self.name
        if self.property_changes is not None:
            data["propertyChanges"] = [p.to_dict() for p in self.property_changes]
        return data


@dataclass
class CriticalChangeSummary:
    """True totals of critical changes per severity."""

    total_critical: int = 0
    high_severity: int = 0
    medium_severity: int = 0
    low_severity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "totalCritical": self.total_critical,
            "highSeverity": self.high_severity,
            "mediumSeverity": self.medium_severity,
            "lowSeverity": self.low_severity,
        }


@dataclass
class CriticalChangeReport:
    """Severity-tagged subset of a comparison."""

    summary: CriticalChangeSummary = field(default_factory=CriticalChangeSummary)
    critical_changes: List[CriticalChange] = field(default_factory=list)

    @property
    def has_critical_changes(self) -> bool:
        return self.summary.total_critical > 0

    @property
    def is_truncated(self) -> bool:
        return len(self.critical_changes) < self.summary.total_critical

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hasCriticalChanges": self.has_critical_changes,
            "summary": self.summary.to_dict(),
            "criticalChanges": [c.to_dict() for c in self.critical_changes],
        }


def is_critical_type(element_type: str, config: Optional[CriticalChangeConfig] = None) -> bool:
    """Check whether an element type is one of the structural categories."""
    config = config or CriticalChangeConfig()
    if not element_type:
        return False

    if config.exact_type_match:
        return element_type in config.critical_types

    lowered = element_type.lower()
    return any(t.lower() in lowered for t in config.critical_types)


class CriticalChangeClassifier:
    """Classify comparison changes to structural elements by severity."""

    def __init__(self, config: Optional[CriticalChangeConfig] = None):
        """
        Initialize classifier.

        Args:
            config: Critical change configuration
        """
        self.config = config or CriticalChangeConfig()
        self._property_keys = [k.lower() for k in self.config.critical_property_keys]

    def touches_critical_property(self, property_changes: Optional[List[PropertyChange]]) -> bool:
        """Whether any property change hits the dimension/material allow-list."""
        for change in property_changes or []:
            name = change.property_name.lower()
            if any(key in name for key in self._property_keys):
                return True
        return False

    def determine_severity(self, change: ElementChange) -> Severity:
        """Severity of one change to a critical element."""
        if change.change_type == ChangeType.REMOVED:
            return Severity.HIGH
        if change.change_type == ChangeType.MODIFIED:
            if self.touches_critical_property(change.property_changes):
                return Severity.MEDIUM
            return Severity.LOW
        return Severity.LOW

    @staticmethod
    def describe(change: ElementChange) -> str:
        """Readable description of a change."""
        label = change.name or f"{change.type} element"
        if change.change_type == ChangeType.ADDED:
            return f"Added {label}"
        if change.change_type == ChangeType.REMOVED:
            return f"Removed {label}"

        names = [p.property_name for p in change.property_changes or []]
        if names:
            return f"Modified {label} ({', '.join(names)})"
        return f"Modified {label}"

    def classify(self, comparison: ComparisonResult) -> CriticalChangeReport:
        """
        Classify critical changes of a comparison.

        Args:
            comparison: Comparison result

        Returns:
            Report whose summary holds true totals; the detail list is ordered
            by severity and capped at ``max_critical_changes``
        """
        critical_changes = []

        for change in comparison.added + comparison.removed + comparison.modified:
            if not is_critical_type(change.type, self.config):
                continue

            critical_changes.append(CriticalChange(
                express_id=change.express_id,
                type=change.type,
                change_type=change.change_type,
                severity=self.determine_severity(change),
                description=self.describe(change),
                global_id=change.global_id,
                name=change.name,
                property_changes=change.property_changes,
            ))

        summary = CriticalChangeSummary(
            total_critical=len(critical_changes),
            high_severity=sum(1 for c in critical_changes if c.severity == Severity.HIGH),
            medium_severity=sum(1 for c in critical_changes if c.severity == Severity.MEDIUM),
            low_severity=sum(1 for c in critical_changes if c.severity == Severity.LOW),
        )

        # Stable sort keeps input order within a severity
        critical_changes.sort(key=lambda c: c.severity.rank, reverse=True)
        limit = max(self.config.max_critical_changes, 0)

        return CriticalChangeReport(
            summary=summary,
            critical_changes=critical_changes[:limit],
        )


def classify(
    comparison: ComparisonResult,
    critical_types: Optional[Sequence[str]] = None,
    config: Optional[CriticalChangeConfig] = None,
) -> CriticalChangeReport:
    """
    Classify critical changes of a comparison.

    Args:
        comparison: Comparison result
        critical_types: Structural type tags, overriding the config's
        config: Critical change configuration

    Returns:
        Critical change report
    """
    config = config or CriticalChangeConfig()
    if critical_types is not None:
        config = replace(config, critical_types=tuple(critical_types))
    return CriticalChangeClassifier(config).classify(comparison)
