"""Pairwise comparison of element snapshots."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import logging

from .identity import AmbiguousIdentityWarning, IdentityResolver
from .snapshot import Element, ElementSnapshot
from .values import MISSING, values_equal

logger = logging.getLogger(__name__)


class ChangeType(Enum):
    """Type of change between snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass
class PropertyChange:
    """Change of a single property on a matched element."""

    property_name: str
    old_value: Any = MISSING
    new_value: Any = MISSING

    @property
    def is_addition(self) -> bool:
        return self.old_value is MISSING

    @property
    def is_removal(self) -> bool:
        return self.new_value is MISSING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary. Absent sides are omitted."""
        data: Dict[str, Any] = {"propertyName": self.property_name}
        if self.old_value is not MISSING:
            data["oldValue"] = self.old_value
        if self.new_value is not MISSING:
            data["newValue"] = self.new_value
        return data


@dataclass
class ElementChange:
    """An added, removed or modified element."""

    express_id: Optional[int]
    type: str
    change_type: ChangeType
    global_id: Optional[str] = None
    name: Optional[str] = None
    property_changes: Optional[List[PropertyChange]] = None

    @classmethod
    def from_element(
        cls,
        element: Element,
        change_type: ChangeType,
        property_changes: Optional[List[PropertyChange]] = None,
    ) -> "ElementChange":
        return cls(
            express_id=element.express_id,
            type=element.type,
            change_type=change_type,
            global_id=element.global_id,
            name=element.name,
            property_changes=property_changes,
        )

    @property
    def identity(self) -> str:
        """globalId, falling back to the expressId."""
        if self.global_id:
            return self.global_id
        return f"#{self.express_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "expressId": self.express_id,
            "type": self.type,
            "changeType": self.change_type.value,
        }
        if self.global_id:
            data["globalId"] = self.global_id
        if self.name is not None:
            data["name"] = self.name
        if self.property_changes is not None:
            data["propertyChanges"] = [p.to_dict() for p in self.property_changes]
        return data


@dataclass
class ComparisonStatistics:
    """Counts for one comparison."""

    total_changes: int = 0
    added_count: int = 0
    removed_count: int = 0
    modified_count: int = 0
    unchanged_count: int = 0
    changes_by_type: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "totalChanges": self.total_changes,
            "addedCount": self.added_count,
            "removedCount": self.removed_count,
            "modifiedCount": self.modified_count,
            "unchangedCount": self.unchanged_count,
            "changesByType": self.changes_by_type,
        }


@dataclass
class ComparisonResult:
    """Structured result of comparing two snapshots."""

    added: List[ElementChange] = field(default_factory=list)
    removed: List[ElementChange] = field(default_factory=list)
    modified: List[ElementChange] = field(default_factory=list)
    statistics: ComparisonStatistics = field(default_factory=ComparisonStatistics)
    warnings: List[AmbiguousIdentityWarning] = field(default_factory=list)
    old_version_id: Any = None
    new_version_id: Any = None

    @property
    def all_changes(self) -> List[ElementChange]:
        return self.added + self.removed + self.modified

    @property
    def has_changes(self) -> bool:
        return self.statistics.total_changes > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "oldVersionId": self.old_version_id,
            "newVersionId": self.new_version_id,
            "added": [c.to_dict() for c in self.added],
            "removed": [c.to_dict() for c in self.removed],
            "modified": [c.to_dict() for c in self.modified],
            "statistics": self.statistics.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class CompareConfig:
    """Configuration for pairwise comparison."""

    strict_identity: bool = False


def diff_properties(
    old_props: Dict[str, Any],
    new_props: Dict[str, Any],
) -> List[PropertyChange]:
    """
    Diff two property bags.

    Keys of the old bag come first, in their order, then keys only in the new
    bag.

    Args:
        old_props: Old properties
        new_props: New properties

    Returns:
        Property changes, empty when the bags are structurally equal
    """
    changes = []

    for name, old_value in old_props.items():
        new_value = new_props.get(name, MISSING)
        if not values_equal(old_value, new_value):
            changes.append(PropertyChange(name, old_value, new_value))

    for name, new_value in new_props.items():
        if name not in old_props:
            changes.append(PropertyChange(name, MISSING, new_value))

    return changes


def compute_statistics(
    added: List[ElementChange],
    removed: List[ElementChange],
    modified: List[ElementChange],
    unchanged_count: int = 0,
) -> ComparisonStatistics:
    """Count changes overall and per element type."""
    by_type: Dict[str, Dict[str, int]] = {}

    for changes in (added, removed, modified):
        for change in changes:
            counts = by_type.setdefault(change.type, {"added": 0, "removed": 0, "modified": 0})
            counts[change.change_type.value] += 1

    return ComparisonStatistics(
        total_changes=len(added) + len(removed) + len(modified),
        added_count=len(added),
        removed_count=len(removed),
        modified_count=len(modified),
        unchanged_count=unchanged_count,
        changes_by_type=by_type,
    )


class ModelComparer:
    """Compare two element snapshots."""

    def __init__(self, config: Optional[CompareConfig] = None):
        """
        Initialize comparer.

        Args:
            config: Comparison configuration
        """
        self.config = config or CompareConfig()
        self.resolver = IdentityResolver(strict=self.config.strict_identity)

    def compare(self, old: ElementSnapshot, new: ElementSnapshot) -> ComparisonResult:
        """
        Compare two snapshots.

        Args:
            old: Old/base snapshot
            new: New snapshot

        Returns:
            Comparison result
        """
        match = self.resolver.resolve(old, new)

        added = [ElementChange.from_element(e, ChangeType.ADDED) for e in match.unmatched_new]
        removed = [ElementChange.from_element(e, ChangeType.REMOVED) for e in match.unmatched_old]
        modified = []
        unchanged = 0

        for old_element, new_element in match.matched:
            changes = diff_properties(old_element.properties or {}, new_element.properties or {})
            if changes:
                modified.append(ElementChange.from_element(new_element, ChangeType.MODIFIED, changes))
            else:
                unchanged += 1

        result = ComparisonResult(
            added=added,
            removed=removed,
            modified=modified,
            statistics=compute_statistics(added, removed, modified, unchanged),
            warnings=match.warnings,
            old_version_id=old.version_id,
            new_version_id=new.version_id,
        )

        logger.debug(
            "Compared %r -> %r: %d added, %d removed, %d modified, %d unchanged",
            old.version_id,
            new.version_id,
            len(added),
            len(removed),
            len(modified),
            unchanged,
        )
        return result


def compare_models(
    old: ElementSnapshot,
    new: ElementSnapshot,
    config: Optional[CompareConfig] = None,
) -> ComparisonResult:
    """
    Compare two snapshots.

    Args:
        old: Old/base snapshot
        new: New snapshot
        config: Comparison configuration

    Returns:
        Comparison result
    """
    return ModelComparer(config).compare(old, new)


def filter_changes_by_type(result: ComparisonResult, element_type: str) -> ComparisonResult:
    """Keep only changes to elements of the given type."""
    added = [c for c in result.added if c.type == element_type]
    removed = [c for c in result.removed if c.type == element_type]
    modified = [c for c in result.modified if c.type == element_type]

    return ComparisonResult(
        added=added,
        removed=removed,
        modified=modified,
        statistics=compute_statistics(added, removed, modified),
        warnings=list(result.warnings),
        old_version_id=result.old_version_id,
        new_version_id=result.new_version_id,
    )


def filter_changes_by_change_type(
    result: ComparisonResult,
    change_type: Union[ChangeType, str],
) -> List[ElementChange]:
    """Get the change list for one kind of change."""
    change_type = ChangeType(change_type)
    if change_type == ChangeType.ADDED:
        return result.added
    if change_type == ChangeType.REMOVED:
        return result.removed
    return result.modified


def generate_change_summary(result: ComparisonResult) -> str:
    """Plain-text summary of a comparison."""
    stats = result.statistics
    lines = [
        f"Total changes detected: {stats.total_changes}",
        f"- Added elements: {stats.added_count}",
        f"- Removed elements: {stats.removed_count}",
        f"- Modified elements: {stats.modified_count}",
        f"- Unchanged elements: {stats.unchanged_count}",
        "",
        "Changes by element type:",
    ]

    for element_type, counts in stats.changes_by_type.items():
        if not any(counts.values()):
            continue
        lines.append(f"  {element_type}:")
        if counts["added"]:
            lines.append(f"    + {counts['added']} added")
        if counts["removed"]:
            lines.append(f"    - {counts['removed']} removed")
        if counts["modified"]:
            lines.append(f"    ~ {counts['modified']} modified")

    if result.warnings:
        lines.append("")
        lines.append(f"Warnings: {len(result.warnings)}")
        for warning in result.warnings:
            lines.append(f"  ! {warning.message}")

    return "\n".join(lines)

