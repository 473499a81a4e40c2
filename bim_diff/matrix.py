"""Multi-version comparison matrix and heatmap normalization."""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from .diff import CompareConfig, ModelComparer
from .errors import ComparisonCancelledError, InvalidInputError
from .snapshot import ElementSnapshot

logger = logging.getLogger(__name__)


@dataclass
class MultiComparisonCell:
    """Change counts for one ordered version pair."""

    old_version_id: Any
    new_version_id: Any
    total_changes: int = 0
    added_count: int = 0
    removed_count: int = 0
    modified_count: int = 0

    @classmethod
    def zero(cls, old_version_id: Any, new_version_id: Any) -> "MultiComparisonCell":
        return cls(old_version_id=old_version_id, new_version_id=new_version_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "oldVersionId": self.old_version_id,
            "newVersionId": self.new_version_id,
            "totalChanges": self.total_changes,
            "addedCount": self.added_count,
            "removedCount": self.removed_count,
            "modifiedCount": self.modified_count,
        }


@dataclass
class MultiComparisonSummary:
    """Statistics over off-diagonal cells that have changes."""

    total_comparisons: int = 0
    max_changes: int = 0
    min_changes: int = 0
    avg_changes: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "totalComparisons": self.total_comparisons,
            "maxChanges": self.max_changes,
            "minChanges": self.min_changes,
            "avgChanges": self.avg_changes,
        }


@dataclass
class MultiComparisonResult:
    """N x N matrix of pairwise comparisons."""

    version_ids: List[Any] = field(default_factory=list)
    matrix: List[List[MultiComparisonCell]] = field(default_factory=list)
    summary: MultiComparisonSummary = field(default_factory=MultiComparisonSummary)

    @property
    def size(self) -> int:
        return len(self.version_ids)

    def cell(self, old_version_id: Any, new_version_id: Any) -> MultiComparisonCell:
        """Look up a cell by version ids."""
        i = self.version_ids.index(old_version_id)
        j = self.version_ids.index(new_version_id)
        return self.matrix[i][j]

    def heatmap(self) -> List[List[float]]:
        return generate_heatmap(self.matrix)

    def to_dict(self, include_heatmap: bool = False) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "versionIds": self.version_ids,
            "matrix": [[cell.to_dict() for cell in row] for row in self.matrix],
            "summary": self.summary.to_dict(),
        }
        if include_heatmap:
            data["heatmap"] = self.heatmap()
        return data


@dataclass
class MatrixConfig:
    """Configuration for multi-version comparison."""

    max_workers: Optional[int] = None
    should_cancel: Optional[Callable[[], bool]] = None
    compare: CompareConfig = field(default_factory=CompareConfig)


class MultiVersionComparer:
    """Compare every ordered pair of N snapshots."""

    def __init__(self, config: Optional[MatrixConfig] = None):
        """
        Initialize comparer.

        Args:
            config: Matrix configuration
        """
        self.config = config or MatrixConfig()
        self.comparer = ModelComparer(self.config.compare)

    def _check_cancelled(self) -> None:
        should_cancel = self.config.should_cancel
        if should_cancel is not None and should_cancel():
            logger.warning("Multi-version comparison cancelled")
            raise ComparisonCancelledError("Multi-version comparison cancelled")

    def _compute_cell(self, old: ElementSnapshot, new: ElementSnapshot) -> MultiComparisonCell:
        self._check_cancelled()
        stats = self.comparer.compare(old, new).statistics
        return MultiComparisonCell(
            old_version_id=old.version_id,
            new_version_id=new.version_id,
            total_changes=stats.total_changes,
            added_count=stats.added_count,
            removed_count=stats.removed_count,
            modified_count=stats.modified_count,
        )

    def _compute_cells(
        self,
        snapshots: Sequence[ElementSnapshot],
        pairs: List[Tuple[int, int]],
    ) -> Dict[Tuple[int, int], MultiComparisonCell]:
        workers = self.config.max_workers
        if workers == 1 or len(pairs) <= 1:
            return {(i, j): self._compute_cell(snapshots[i], snapshots[j]) for i, j in pairs}

        with ThreadPoolExecutor(max_workers=workers or min(8, len(pairs))) as pool:
            futures = {
                pool.submit(self._compute_cell, snapshots[i], snapshots[j]): (i, j)
                for i, j in pairs
            }
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            for future in not_done:
                future.cancel()

            # All or nothing: the first failure fails the whole matrix
            for future in done:
                error = future.exception()
                if error is not None:
                    i, j = futures[future]
                    logger.error(
                        "Comparison %r -> %r failed: %s",
                        snapshots[i].version_id,
                        snapshots[j].version_id,
                        error,
                    )
                    raise error

            return {futures[future]: future.result() for future in futures}

    def compare(self, snapshots: Sequence[ElementSnapshot]) -> MultiComparisonResult:
        """
        Build the comparison matrix.

        Args:
            snapshots: One or more snapshots; matrix[i][j] compares i -> j

        Returns:
            Multi-comparison result
        """
        if not snapshots:
            raise InvalidInputError("At least one snapshot is required")
        for position, snapshot in enumerate(snapshots):
            if snapshot is None:
                raise InvalidInputError(f"Snapshot at position {position} is missing")

        version_ids = [s.version_id for s in snapshots]
        n = len(snapshots)
        pairs = [(i, j) for i in range(n) for j in range(n) if i != j]

        logger.debug("Comparing %d versions (%d pairs)", n, len(pairs))
        cells = self._compute_cells(snapshots, pairs)

        matrix = [
            [
                MultiComparisonCell.zero(version_ids[i], version_ids[j]) if i == j else cells[(i, j)]
                for j in range(n)
            ]
            for i in range(n)
        ]

        return MultiComparisonResult(
            version_ids=version_ids,
            matrix=matrix,
            summary=summarize_cells([cells[p] for p in pairs], n),
        )


def summarize_cells(cells: Sequence[MultiComparisonCell], n: int) -> MultiComparisonSummary:
    """Summary statistics over off-diagonal cells, ignoring zero-change cells."""
    totals = np.array([c.total_changes for c in cells], dtype=np.int64)
    nonzero = totals[totals > 0]

    if nonzero.size == 0:
        return MultiComparisonSummary(total_comparisons=n * (n - 1))

    return MultiComparisonSummary(
        total_comparisons=n * (n - 1),
        max_changes=int(nonzero.max()),
        min_changes=int(nonzero.min()),
        avg_changes=float(nonzero.mean()),
    )


def compare_multiple_versions(
    snapshots: Sequence[ElementSnapshot],
    config: Optional[MatrixConfig] = None,
) -> MultiComparisonResult:
    """
    Compare every ordered pair of snapshots.

    Args:
        snapshots: One or more snapshots
        config: Matrix configuration

    Returns:
        Multi-comparison result
    """
    return MultiVersionComparer(config).compare(snapshots)


def heatmap_array(matrix: Sequence[Sequence[MultiComparisonCell]]) -> np.ndarray:
    """
    Normalize a change-count matrix to [0, 1].

    Every cell is divided by the largest off-diagonal ``total_changes``. When
    that maximum is zero the grid is all zeros.

    Args:
        matrix: Square matrix of cells

    Returns:
        Float array of the same shape
    """
    n = len(matrix)
    if any(len(row) != n for row in matrix):
        raise InvalidInputError("Comparison matrix must be square")

    totals = np.array(
        [[cell.total_changes for cell in row] for row in matrix],
        dtype=np.float64,
    ).reshape(n, n)

    off_diagonal = totals[~np.eye(n, dtype=bool)]
    max_changes = off_diagonal.max() if off_diagonal.size else 0.0

    if max_changes <= 0:
        return np.zeros((n, n), dtype=np.float64)
    return np.clip(totals / max_changes, 0.0, 1.0)


def generate_heatmap(matrix: Sequence[Sequence[MultiComparisonCell]]) -> List[List[float]]:
    """Normalized heatmap grid as nested lists of floats."""
    return heatmap_array(matrix).tolist()
