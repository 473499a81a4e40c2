"""BIM Diff - Compare building-model element snapshots across versions."""

from .errors import (
    BimDiffError,
    InvalidInputError,
    AmbiguousIdentityError,
    ComparisonCancelledError,
)
from .values import (
    MISSING,
    canonicalize,
    values_equal,
)
from .snapshot import (
    Element,
    ElementSnapshot,
    SnapshotLoader,
    SnapshotProvider,
    InMemorySnapshotProvider,
    DirectorySnapshotProvider,
    load_snapshot,
    fetch_snapshots,
)
from .identity import (
    IdentityResolver,
    IdentityMatch,
    AmbiguousIdentityWarning,
    identity_key,
)
from .diff import (
    ChangeType,
    PropertyChange,
    ElementChange,
    ComparisonStatistics,
    ComparisonResult,
    CompareConfig,
    ModelComparer,
    compare_models,
    filter_changes_by_type,
    filter_changes_by_change_type,
    generate_change_summary,
)
from .critical import (
    Severity,
    CriticalChange,
    CriticalChangeSummary,
    CriticalChangeReport,
    CriticalChangeConfig,
    CriticalChangeClassifier,
    classify,
    is_critical_type,
)
from .alerts import (
    CriticalAlert,
    build_critical_alert,
    notify_on_high_severity,
)
from .matrix import (
    MultiComparisonCell,
    MultiComparisonSummary,
    MultiComparisonResult,
    MatrixConfig,
    MultiVersionComparer,
    compare_multiple_versions,
    generate_heatmap,
    heatmap_array,
)
from .visualization import (
    ComparisonVisualizer,
    VisualizationConfig,
    create_comparison_report,
    create_matrix_report,
)

__version__ = "0.1.0"
__all__ = [
    # Errors
    "BimDiffError",
    "InvalidInputError",
    "AmbiguousIdentityError",
    "ComparisonCancelledError",
    # Values
    "MISSING",
    "canonicalize",
    "values_equal",
    # Snapshot
    "Element",
    "ElementSnapshot",
    "SnapshotLoader",
    "SnapshotProvider",
    "InMemorySnapshotProvider",
    "DirectorySnapshotProvider",
    "load_snapshot",
    "fetch_snapshots",
    # Identity
    "IdentityResolver",
    "IdentityMatch",
    "AmbiguousIdentityWarning",
    "identity_key",
    # Diff
    "ChangeType",
    "PropertyChange",
    "ElementChange",
    "ComparisonStatistics",
    "ComparisonResult",
    "CompareConfig",
    "ModelComparer",
    "compare_models",
    "filter_changes_by_type",
    "filter_changes_by_change_type",
    "generate_change_summary",
    # Critical changes
    "Severity",
    "CriticalChange",
    "CriticalChangeSummary",
    "CriticalChangeReport",
    "CriticalChangeConfig",
    "CriticalChangeClassifier",
    "classify",
    "is_critical_type",
    # Alerts
    "CriticalAlert",
    "build_critical_alert",
    "notify_on_high_severity",
    # Matrix
    "MultiComparisonCell",
    "MultiComparisonSummary",
    "MultiComparisonResult",
    "MatrixConfig",
    "MultiVersionComparer",
    "compare_multiple_versions",
    "generate_heatmap",
    "heatmap_array",
    # Visualization
    "ComparisonVisualizer",
    "VisualizationConfig",
    "create_comparison_report",
    "create_matrix_report",
]
