#!/usr/bin/env python3
"""
BIM Diff - Model Version Comparison Example

This example demonstrates how to compare versions of a building model
to understand which elements were added, removed or modified.
"""

from bim_diff import (
    ElementSnapshot,
    ModelComparer,
    CriticalChangeClassifier,
    compare_multiple_versions,
    filter_changes_by_type,
    generate_change_summary,
    notify_on_high_severity,
    create_comparison_report,
    create_matrix_report,
)


def main():
    print("=" * 60)
    print("BIM Diff - Model Version Comparison")
    print("=" * 60)

    v1 = ElementSnapshot.from_elements("v1", [
        {"expressId": 1, "type": "IfcWall", "globalId": "w1", "name": "Core wall",
         "properties": {"height": 3.0, "thickness": 0.2, "LoadBearing": True}},
        {"expressId": 2, "type": "IfcColumn", "globalId": "c1", "name": "Column A1",
         "properties": {"height": 3.0, "material": "Concrete"}},
        {"expressId": 3, "type": "IfcDoor", "globalId": "d1",
         "properties": {"width": 0.9}},
    ])

    v2 = ElementSnapshot.from_elements("v2", [
        {"expressId": 1, "type": "IfcWall", "globalId": "w1", "name": "Core wall",
         "properties": {"height": 3.2, "thickness": 0.2, "LoadBearing": True}},
        {"expressId": 3, "type": "IfcDoor", "globalId": "d1",
         "properties": {"width": 1.0}},
        {"expressId": 7, "type": "IfcWindow", "globalId": "win1",
         "properties": {"width": 1.2, "height": 1.5}},
    ])

    v3 = ElementSnapshot.from_elements("v3", list(v2.elements) + [
        {"expressId": 9, "type": "IfcBeam", "globalId": "b1",
         "properties": {"length": 6.0}},
    ])

    # Example 1: Pairwise comparison
    print("\n1. Comparing v1 -> v2...")

    comparer = ModelComparer()
    result = comparer.compare(v1, v2)

    print()
    print(generate_change_summary(result))

    # Example 2: Critical changes
    print("\n" + "-" * 60)
    print("2. Critical structural changes...")

    report = CriticalChangeClassifier().classify(result)
    print(f"\n   Total critical: {report.summary.total_critical}")
    print(f"   High: {report.summary.high_severity}")
    print(f"   Medium: {report.summary.medium_severity}")
    print(f"   Low: {report.summary.low_severity}")

    for change in report.critical_changes:
        print(f"     [{change.severity.value.upper()}] {change.description}")

    # Example 3: Owner notification
    print("\n" + "-" * 60)
    print("3. Notifying the owner...")

    alert = notify_on_high_severity(report, lambda a: print(f"\n   >>> {a.title}"), "v1", "v2")
    print(f"   Alert sent: {alert is not None}")

    # Example 4: Filtering
    print("\n" + "-" * 60)
    print("4. Filtering to doors...")

    doors = filter_changes_by_type(result, "IfcDoor")
    print(f"   Door changes: {doors.statistics.total_changes}")

    # Example 5: Multi-version matrix
    print("\n" + "-" * 60)
    print("5. Comparing all versions...")

    matrix = compare_multiple_versions([v1, v2, v3])
    print(f"   Comparisons: {matrix.summary.total_comparisons}")
    print(f"   Max changes: {matrix.summary.max_changes}")
    print(f"   Avg changes: {matrix.summary.avg_changes:.2f}")
    print()
    print(create_matrix_report(matrix, format="text"))

    # Example 6: Export
    print("\n" + "-" * 60)
    print("6. Exporting reports...")

    json_output = create_comparison_report(result, report, format="json")
    print(f"   JSON export: {len(json_output)} characters")

    html_output = create_comparison_report(result, report, format="html", old_name="v1", new_name="v2")
    print(f"   HTML export: {len(html_output)} characters")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
