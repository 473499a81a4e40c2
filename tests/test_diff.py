"""Tests for pairwise comparison."""

import json

import pytest

from bim_diff.errors import AmbiguousIdentityError, InvalidInputError
from bim_diff.snapshot import ElementSnapshot
from bim_diff.values import MISSING
from bim_diff.diff import (
    ChangeType,
    PropertyChange,
    ElementChange,
    ComparisonResult,
    CompareConfig,
    ModelComparer,
    compare_models,
    compute_statistics,
    diff_properties,
    filter_changes_by_type,
    filter_changes_by_change_type,
    generate_change_summary,
)


def create_snapshot(version_id, *elements) -> ElementSnapshot:
    """Create a test snapshot from element records."""
    return ElementSnapshot.from_elements(version_id, list(elements))


def el(express_id, global_id=None, element_type="IfcWall", name=None, **properties) -> dict:
    """Element record helper."""
    return {
        "expressId": express_id,
        "type": element_type,
        "globalId": global_id,
        "name": name,
        "properties": properties,
    }


def identities(changes):
    return {c.identity for c in changes}


class TestChangeType:
    """Tests for ChangeType enum."""

    def test_types_exist(self):
        assert ChangeType.ADDED
        assert ChangeType.REMOVED
        assert ChangeType.MODIFIED

    def test_type_values(self):
        assert ChangeType.ADDED.value == "added"
        assert ChangeType.REMOVED.value == "removed"
        assert ChangeType.MODIFIED.value == "modified"


class TestPropertyChange:
    """Tests for PropertyChange."""

    def test_changed(self):
        change = PropertyChange("height", 3, 4)
        assert not change.is_addition
        assert not change.is_removal
        assert change.to_dict() == {"propertyName": "height", "oldValue": 3, "newValue": 4}

    def test_addition_omits_old_value(self):
        change = PropertyChange("c", MISSING, 4)
        assert change.is_addition
        assert change.to_dict() == {"propertyName": "c", "newValue": 4}

    def test_removal_omits_new_value(self):
        change = PropertyChange("c", 4, MISSING)
        assert change.is_removal
        assert change.to_dict() == {"propertyName": "c", "oldValue": 4}

    def test_null_is_a_value(self):
        change = PropertyChange("c", None, 1)
        assert not change.is_addition
        assert change.to_dict()["oldValue"] is None


class TestElementChange:
    """Tests for ElementChange."""

    def test_identity(self):
        assert ElementChange(1, "IfcWall", ChangeType.ADDED, global_id="g").identity == "g"
        assert ElementChange(1, "IfcWall", ChangeType.ADDED).identity == "#1"

    def test_to_dict(self):
        change = ElementChange(
            1, "IfcWall", ChangeType.MODIFIED, global_id="w1", name="Wall",
            property_changes=[PropertyChange("height", 3, 4)],
        )
        d = change.to_dict()
        assert d["expressId"] == 1
        assert d["changeType"] == "modified"
        assert d["globalId"] == "w1"
        assert d["propertyChanges"][0]["propertyName"] == "height"

    def test_to_dict_without_property_changes(self):
        d = ElementChange(1, "IfcWall", ChangeType.REMOVED).to_dict()
        assert "propertyChanges" not in d
        assert "globalId" not in d


class TestDiffProperties:
    """Tests for property diffing."""

    def test_completeness(self):
        changes = diff_properties({"a": 1, "b": 2}, {"a": 1, "b": 3, "c": 4})

        assert [c.property_name for c in changes] == ["b", "c"]
        assert changes[0].old_value == 2
        assert changes[0].new_value == 3
        assert changes[1].old_value is MISSING
        assert changes[1].new_value == 4

    def test_removed_property(self):
        changes = diff_properties({"a": 1}, {})
        assert len(changes) == 1
        assert changes[0].is_removal

    def test_equal(self):
        assert diff_properties({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}) == []

    def test_null_vs_absent(self):
        changes = diff_properties({"a": None}, {})
        assert len(changes) == 1
        assert changes[0].old_value is None
        assert changes[0].new_value is MISSING

    def test_type_sensitive(self):
        changes = diff_properties({"LoadBearing": True}, {"LoadBearing": 1})
        assert len(changes) == 1


class TestModelComparer:
    """Tests for ModelComparer."""

    def test_removed_wall(self):
        old = create_snapshot("v1", el(1, "w1", height=3))
        new = create_snapshot("v2")

        result = compare_models(old, new)

        assert identities(result.removed) == {"w1"}
        assert result.removed[0].property_changes is None
        assert result.removed[0].change_type == ChangeType.REMOVED
        stats = result.statistics
        assert stats.total_changes == 1
        assert stats.removed_count == 1
        assert stats.added_count == 0
        assert stats.modified_count == 0

    def test_added_door(self):
        old = create_snapshot("v1")
        new = create_snapshot("v2", el(5, "d1", "IfcDoor"))

        result = compare_models(old, new)

        assert identities(result.added) == {"d1"}
        assert result.added[0].express_id == 5
        assert result.statistics.added_count == 1

    def test_modified(self):
        old = create_snapshot("v1", el(1, "w1", a=1, b=2))
        new = create_snapshot("v2", el(7, "w1", a=1, b=3, c=4))

        result = compare_models(old, new)

        assert result.added == []
        assert result.removed == []
        assert len(result.modified) == 1
        change = result.modified[0]
        assert change.express_id == 7
        names = [p.property_name for p in change.property_changes]
        assert names == ["b", "c"]

    def test_unchanged_excluded(self):
        old = create_snapshot("v1", el(1, "w1", a=1), el(2, "w2", a=1))
        new = create_snapshot("v2", el(1, "w1", a=1), el(2, "w2", a=2))

        result = compare_models(old, new)

        assert identities(result.modified) == {"w2"}
        assert result.statistics.unchanged_count == 1

    def test_reflexive(self):
        snapshot = create_snapshot(
            "v1", el(1, "w1", height=3), el(2, None, "IfcDoor", width=0.9), el(3, "s1", "IfcSlab")
        )

        result = compare_models(snapshot, snapshot)

        assert result.added == []
        assert result.removed == []
        assert result.modified == []
        assert result.statistics.total_changes == 0
        assert not result.has_changes

    def test_symmetry(self):
        a = create_snapshot("a", el(1, "w1", h=1), el(2, "w2"), el(3))
        b = create_snapshot("b", el(1, "w1", h=2), el(4, "w4"), el(5))

        ab = compare_models(a, b)
        ba = compare_models(b, a)

        assert identities(ab.added) == identities(ba.removed)
        assert identities(ab.removed) == identities(ba.added)
        assert identities(ab.modified) == identities(ba.modified)

        forward = ab.modified[0].property_changes[0]
        backward = ba.modified[0].property_changes[0]
        assert (forward.old_value, forward.new_value) == (backward.new_value, backward.old_value)

    def test_count_consistency(self):
        old = create_snapshot("v1", el(1, "a"), el(2, "b", x=1), el(3, "c"))
        new = create_snapshot("v2", el(2, "b", x=2), el(3, "c"), el(4, "d"), el(5, "e"))

        result = compare_models(old, new)
        stats = result.statistics

        assert stats.total_changes == len(result.added) + len(result.removed) + len(result.modified)
        assert (stats.added_count, stats.removed_count, stats.modified_count) == (2, 1, 1)

    def test_unique_identities(self):
        old = create_snapshot("v1", el(1, "g"), el(2, "g"), el(3, "h"))
        new = create_snapshot("v2")

        result = compare_models(old, new)

        assert [c.identity for c in result.removed] == ["g", "h"]
        assert len(result.warnings) == 1

    def test_deterministic(self):
        old = create_snapshot("v1", *[el(i, f"g{i}", v=i) for i in range(50)])
        new = create_snapshot("v2", *[el(i, f"g{i}", v=i % 3) for i in range(25, 75)])

        first = json.dumps(compare_models(old, new).to_dict(), sort_keys=True)
        second = json.dumps(compare_models(old, new).to_dict(), sort_keys=True)
        assert first == second

    def test_ordering_follows_input(self):
        old = create_snapshot("v1", el(1, "r2"), el(2, "r1"))
        new = create_snapshot("v2", el(3, "a2"), el(4, "a1"))

        result = compare_models(old, new)

        assert [c.global_id for c in result.removed] == ["r2", "r1"]
        assert [c.global_id for c in result.added] == ["a2", "a1"]

    def test_changes_by_type(self):
        old = create_snapshot("v1", el(1, "w1"), el(2, "d1", "IfcDoor", w=1))
        new = create_snapshot("v2", el(2, "d1", "IfcDoor", w=2), el(3, "w2"))

        stats = compare_models(old, new).statistics

        assert stats.changes_by_type["IfcWall"] == {"added": 1, "removed": 1, "modified": 0}
        assert stats.changes_by_type["IfcDoor"] == {"added": 0, "removed": 0, "modified": 1}

    def test_strict_identity(self):
        old = create_snapshot("v1", el(1, "g"), el(2, "g"))
        comparer = ModelComparer(CompareConfig(strict_identity=True))

        with pytest.raises(AmbiguousIdentityError):
            comparer.compare(old, create_snapshot("v2"))

    def test_missing_snapshot(self):
        with pytest.raises(InvalidInputError):
            compare_models(create_snapshot("v1"), None)

    def test_large_snapshot(self):
        old = create_snapshot("v1", *[el(i, f"g{i}", height=i) for i in range(20000)])
        new = create_snapshot("v2", *[el(i, f"g{i}", height=i + (i % 2)) for i in range(1, 20001)])

        result = compare_models(old, new)

        assert result.statistics.removed_count == 1
        assert result.statistics.added_count == 1
        assert result.statistics.modified_count == 10000

    def test_to_dict(self):
        result = compare_models(create_snapshot("v1", el(1, "w1")), create_snapshot("v2"))
        d = result.to_dict()

        assert d["oldVersionId"] == "v1"
        assert d["newVersionId"] == "v2"
        assert d["statistics"]["totalChanges"] == 1
        assert d["removed"][0]["globalId"] == "w1"
        assert d["warnings"] == []
        json.dumps(d)


class TestComputeStatistics:
    """Tests for statistics."""

    def test_empty(self):
        stats = compute_statistics([], [], [])
        assert stats.total_changes == 0
        assert stats.changes_by_type == {}

    def test_to_dict(self):
        stats = compute_statistics([ElementChange(1, "IfcWall", ChangeType.ADDED)], [], [], 3)
        d = stats.to_dict()
        assert d["totalChanges"] == 1
        assert d["addedCount"] == 1
        assert d["unchangedCount"] == 3


class TestFilters:
    """Tests for change filters."""

    def create_result(self) -> ComparisonResult:
        old = create_snapshot("v1", el(1, "w1"), el(2, "d1", "IfcDoor", w=1))
        new = create_snapshot("v2", el(2, "d1", "IfcDoor", w=2), el(3, "d2", "IfcDoor"))
        return compare_models(old, new)

    def test_filter_by_type(self):
        doors = filter_changes_by_type(self.create_result(), "IfcDoor")

        assert identities(doors.added) == {"d2"}
        assert doors.removed == []
        assert identities(doors.modified) == {"d1"}
        assert doors.statistics.total_changes == 2

    def test_filter_by_unknown_type(self):
        result = filter_changes_by_type(self.create_result(), "IfcStair")
        assert result.statistics.total_changes == 0

    def test_filter_by_change_type(self):
        result = self.create_result()
        assert filter_changes_by_change_type(result, ChangeType.REMOVED) == result.removed
        assert filter_changes_by_change_type(result, "added") == result.added
        assert filter_changes_by_change_type(result, "modified") == result.modified

    def test_filter_by_invalid_change_type(self):
        with pytest.raises(ValueError):
            filter_changes_by_change_type(self.create_result(), "renamed")


class TestChangeSummary:
    """Tests for text summary."""

    def test_summary(self):
        old = create_snapshot("v1", el(1, "w1"), el(2, "d1", "IfcDoor", w=1))
        new = create_snapshot("v2", el(2, "d1", "IfcDoor", w=2))

        text = generate_change_summary(compare_models(old, new))

        assert "Total changes detected: 2" in text
        assert "- Removed elements: 1" in text
        assert "IfcWall:" in text
        assert "- 1 removed" in text
        assert "~ 1 modified" in text

    def test_summary_with_warnings(self):
        old = create_snapshot("v1", el(1, "g"), el(2, "g"))
        text = generate_change_summary(compare_models(old, old))
        assert "Warnings:" in text
