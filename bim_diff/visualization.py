"""Rendering of comparison results."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import html

from .critical import CriticalChangeReport
from .diff import ComparisonResult, ElementChange, generate_change_summary
from .matrix import MultiComparisonResult, generate_heatmap


@dataclass
class VisualizationConfig:
    """Configuration for visualization."""

    max_changes_display: int = 200
    heatmap_precision: int = 2
    include_property_changes: bool = True


CSS = """
        :root {
            --primary: #3b82f6;
            --success: #22c55e;
            --warning: #f59e0b;
            --danger: #ef4444;
            --bg: #0f172a;
            --bg-light: #1e293b;
            --text: #f1f5f9;
            --text-muted: #94a3b8;
            --border: #334155;
        }

        * { margin: 0; padding: 0; box-sizing: border-box; }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg);
            color: var(--text);
            line-height: 1.6;
        }

        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        h1 { font-size: 2rem; margin-bottom: 10px; }
        h2 { font-size: 1.5rem; margin: 30px 0 20px; color: var(--primary); }
        .subtitle { color: var(--text-muted); font-size: 1.1rem; }

        .card {
            background: var(--bg-light);
            border-radius: 12px;
            padding: 25px;
            margin-bottom: 20px;
            border: 1px solid var(--border);
        }

        .stats-grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 20px;
        }

        .stat-card { background: var(--bg); border-radius: 8px; padding: 20px; text-align: center; }
        .stat-value { font-size: 2rem; font-weight: bold; color: var(--primary); }
        .stat-label { color: var(--text-muted); font-size: 0.9rem; margin-top: 5px; }

        .alert { padding: 15px 20px; border-radius: 8px; margin-bottom: 15px; border-left: 4px solid; }
        .alert-high { background: rgba(239, 68, 68, 0.1); border-color: var(--danger); }
        .alert-medium { background: rgba(245, 158, 11, 0.1); border-color: var(--warning); }
        .alert-low { background: rgba(59, 130, 246, 0.1); border-color: var(--primary); }

        table { width: 100%; border-collapse: collapse; font-size: 0.9rem; }
        th, td { padding: 12px 15px; text-align: left; border-bottom: 1px solid var(--border); }
        th { background: var(--bg); color: var(--text-muted); font-weight: 600; }

        .change-added { color: var(--success); }
        .change-removed { color: var(--danger); }
        .change-modified { color: var(--warning); }
        .heat { text-align: center; }
"""


def format_value(value: Any) -> str:
    """Short display form of a property value."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


class ComparisonVisualizer:
    """Render comparisons, critical reports and version matrices."""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        """
        Initialize visualizer.

        Args:
            config: Visualization configuration
        """
        self.config = config or VisualizationConfig()

    def create_html_report(
        self,
        result: ComparisonResult,
        critical: Optional[CriticalChangeReport] = None,
        old_name: str = "Version A",
        new_name: str = "Version B",
    ) -> str:
        """
        Create HTML report of a comparison.

        Args:
            result: Comparison result
            critical: Critical change report
            old_name: Name for old version
            new_name: Name for new version

        Returns:
            HTML string
        """
        critical_html = self._render_critical(critical) if critical is not None else ""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Model Comparison: {html.escape(old_name)} vs {html.escape(new_name)}</title>
    <style>{CSS}</style>
</head>
<body>
    <div class="container">
        <h1>Model Comparison Report</h1>
        <p class="subtitle">{html.escape(old_name)} → {html.escape(new_name)}</p>
        {self._render_summary(result)}
        {critical_html}
        <h2>Element Changes</h2>
        <div class="card">
            {self._render_changes(result)}
        </div>
    </div>
</body>
</html>"""

    def create_matrix_html(self, result: MultiComparisonResult) -> str:
        """Create HTML page with the change matrix as a heatmap table."""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Multi-Version Comparison</title>
    <style>{CSS}</style>
</head>
<body>
    <div class="container">
        <h1>Multi-Version Comparison</h1>
        <p class="subtitle">{result.size} versions, {result.summary.total_comparisons} comparisons</p>
        <div class="card">
            {self._render_heatmap_table(result)}
        </div>
    </div>
</body>
</html>"""

    def _render_summary(self, result: ComparisonResult) -> str:
        """Render summary section."""
        stats = result.statistics
        cards = [
            (stats.total_changes, "Total Changes"),
            (stats.added_count, "Added"),
            (stats.removed_count, "Removed"),
            (stats.modified_count, "Modified"),
            (stats.unchanged_count, "Unchanged"),
        ]
        cards_html = "".join(
            f'<div class="stat-card"><div class="stat-value">{value:,}</div>'
            f'<div class="stat-label">{label}</div></div>'
            for value, label in cards
        )
        return f"""
        <h2>Summary</h2>
        <div class="card">
            <div class="stats-grid">{cards_html}</div>
        </div>
        """

    def _render_critical(self, report: CriticalChangeReport) -> str:
        """Render critical changes section."""
        if not report.has_critical_changes:
            return '<h2>Critical Changes</h2><div class="card"><p>No critical changes detected.</p></div>'

        parts = []
        for change in report.critical_changes:
            parts.append(
                f'<div class="alert alert-{change.severity.value}">'
                f"<strong>{change.severity.value.upper()}</strong> "
                f"{html.escape(change.description)}</div>"
            )

        s = report.summary
        note = ""
        if report.is_truncated:
            note = f"<p>Showing {len(report.critical_changes)} of {s.total_critical} critical changes</p>"

        return f"""
        <h2>Critical Changes</h2>
        <div class="card">
            <p>High: {s.high_severity} · Medium: {s.medium_severity} · Low: {s.low_severity}</p>
            {''.join(parts)}
            {note}
        </div>
        """

    def _render_changes(self, result: ComparisonResult) -> str:
        """Render changes table."""
        changes = result.all_changes
        shown = changes[:self.config.max_changes_display]

        rows = []
        for change in shown:
            rows.append(f"""
            <tr>
                <td>{change.express_id}</td>
                <td>{html.escape(change.global_id or '')}</td>
                <td>{html.escape(change.type)}</td>
                <td>{html.escape(change.name or '')}</td>
                <td><span class="change-{change.change_type.value}">{change.change_type.value}</span></td>
                <td>{html.escape(self._describe_properties(change))}</td>
            </tr>
            """)

        return f"""
        <table>
            <thead>
                <tr>
                    <th>Express ID</th>
                    <th>Global ID</th>
                    <th>Type</th>
                    <th>Name</th>
                    <th>Change</th>
                    <th>Properties</th>
                </tr>
            </thead>
            <tbody>
                {''.join(rows)}
            </tbody>
        </table>
        <p style="color: var(--text-muted); margin-top: 15px;">
            Showing {len(rows)} of {len(changes)} changes
        </p>
        """

    def _describe_properties(self, change: ElementChange) -> str:
        if not self.config.include_property_changes or not change.property_changes:
            return ""

        parts = []
        for p in change.property_changes:
            if p.is_addition:
                parts.append(f"{p.property_name}: +{format_value(p.new_value)}")
            elif p.is_removal:
                parts.append(f"{p.property_name}: -{format_value(p.old_value)}")
            else:
                parts.append(
                    f"{p.property_name}: {format_value(p.old_value)} → {format_value(p.new_value)}"
                )
        return "; ".join(parts)

    def _render_heatmap_table(self, result: MultiComparisonResult) -> str:
        """Render the matrix with heatmap shading."""
        heatmap = generate_heatmap(result.matrix)
        header = "".join(f"<th>{html.escape(str(v))}</th>" for v in result.version_ids)

        rows = []
        for i, row in enumerate(result.matrix):
            cells = []
            for j, cell in enumerate(row):
                alpha = heatmap[i][j]
                cells.append(
                    f'<td class="heat" style="background: rgba(239, 68, 68, {alpha:.2f});" '
                    f'title="+{cell.added_count} -{cell.removed_count} ~{cell.modified_count}">'
                    f"{cell.total_changes}</td>"
                )
            rows.append(f"<tr><th>{html.escape(str(result.version_ids[i]))}</th>{''.join(cells)}</tr>")

        return f"""
        <table>
            <thead><tr><th>old \\ new</th>{header}</tr></thead>
            <tbody>{''.join(rows)}</tbody>
        </table>
        """

    def create_json_report(
        self,
        result: ComparisonResult,
        critical: Optional[CriticalChangeReport] = None,
    ) -> str:
        """Create JSON report."""
        data: Dict[str, Any] = {"comparison": result.to_dict()}
        if critical is not None:
            data["criticalChanges"] = critical.to_dict()
        return json.dumps(data, indent=2, default=str)

    def create_text_report(
        self,
        result: ComparisonResult,
        critical: Optional[CriticalChangeReport] = None,
        old_name: str = "Version A",
        new_name: str = "Version B",
    ) -> str:
        """Create text report."""
        lines = [
            "=" * 60,
            f"MODEL COMPARISON REPORT: {old_name} → {new_name}",
            "=" * 60,
            "",
            "SUMMARY",
            "-" * 40,
            generate_change_summary(result),
            "",
        ]

        if critical is not None:
            s = critical.summary
            lines.extend([
                "CRITICAL CHANGES",
                "-" * 40,
                f"High: {s.high_severity}  Medium: {s.medium_severity}  Low: {s.low_severity}",
            ])
            for change in critical.critical_changes:
                lines.append(f"[{change.severity.value.upper()}] {change.description}")
            lines.append("")

        lines.extend([
            "MODIFIED ELEMENTS",
            "-" * 40,
        ])
        for change in result.modified[:self.config.max_changes_display]:
            lines.append(f"{change.identity} ({change.type}): {self._describe_properties(change)}")

        return "\n".join(lines)

    def create_heatmap_text(self, result: MultiComparisonResult) -> str:
        """Plain-text grid of heatmap intensities."""
        heatmap = generate_heatmap(result.matrix)
        labels = [str(v) for v in result.version_ids]
        width = max([len(label) for label in labels] + [self.config.heatmap_precision + 2])

        lines = [" " * width + " " + " ".join(label.rjust(width) for label in labels)]
        for label, row in zip(labels, heatmap):
            values = " ".join(f"{value:.{self.config.heatmap_precision}f}".rjust(width) for value in row)
            lines.append(f"{label.rjust(width)} {values}")
        return "\n".join(lines)


def create_comparison_report(
    result: ComparisonResult,
    critical: Optional[CriticalChangeReport] = None,
    format: str = "html",
    old_name: str = "Version A",
    new_name: str = "Version B",
    config: Optional[VisualizationConfig] = None,
) -> str:
    """
    Create a comparison report.

    Args:
        result: Comparison result
        critical: Critical change report
        format: Output format (html, json, text)
        old_name: Name for old version
        new_name: Name for new version
        config: Visualization config

    Returns:
        Report string
    """
    visualizer = ComparisonVisualizer(config)

    if format == "html":
        return visualizer.create_html_report(result, critical, old_name, new_name)
    elif format == "json":
        return visualizer.create_json_report(result, critical)
    elif format == "text":
        return visualizer.create_text_report(result, critical, old_name, new_name)
    else:
        raise ValueError(f"Unknown format: {format}")


def create_matrix_report(
    result: MultiComparisonResult,
    format: str = "html",
    config: Optional[VisualizationConfig] = None,
) -> str:
    """
    Create a multi-version comparison report.

    Args:
        result: Multi-comparison result
        format: Output format (html, json, text)
        config: Visualization config

    Returns:
        Report string
    """
    visualizer = ComparisonVisualizer(config)

    if format == "html":
        return visualizer.create_matrix_html(result)
    elif format == "json":
        return json.dumps(result.to_dict(include_heatmap=True), indent=2, default=str)
    elif format == "text":
        return visualizer.create_heatmap_text(result)
    else:
        raise ValueError(f"Unknown format: {format}")
