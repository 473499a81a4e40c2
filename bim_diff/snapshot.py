"""Element snapshots, snapshot loading and snapshot providers."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union
import json
import logging

from .errors import InvalidInputError

logger = logging.getLogger(__name__)

VersionId = Union[int, str]


@dataclass
class Element:
    """A single modeled entity at one version."""

    express_id: Optional[int]
    type: str
    global_id: Optional[str] = None
    name: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_identity(self) -> bool:
        """Whether the element can be matched across snapshots at all."""
        return bool(self.global_id) or self.express_id is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Element":
        """Build an element from its camelCase record shape."""
        if not isinstance(data, dict):
            raise InvalidInputError(f"Element record must be an object, got {type(data).__name__}")

        properties = data.get("properties") or {}
        if not isinstance(properties, dict):
            raise InvalidInputError(
                f"Element {data.get('globalId') or data.get('expressId')!r} has non-object properties"
            )

        return cls(
            express_id=data.get("expressId"),
            type=data.get("type") or "",
            global_id=data.get("globalId") or None,
            name=data.get("name"),
            properties=dict(properties),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "expressId": self.express_id,
            "type": self.type,
            "properties": self.properties,
        }
        if self.global_id:
            data["globalId"] = self.global_id
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass
class ElementSnapshot:
    """The complete element set of one model version."""

    version_id: VersionId
    elements: List[Element] = field(default_factory=list)
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    @property
    def element_types(self) -> List[str]:
        """Distinct element types, in first-seen order."""
        return list(dict.fromkeys(e.type for e in self.elements))

    def get_elements_by_type(self, element_type: str) -> List[Element]:
        """Get elements with the given type tag."""
        return [e for e in self.elements if e.type == element_type]

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version_id: Optional[VersionId] = None) -> "ElementSnapshot":
        """
        Build a snapshot from a record.

        Args:
            data: ``{"versionId": ..., "elements": [...]}``
            version_id: Overrides the record's version id

        Returns:
            Snapshot
        """
        vid = version_id if version_id is not None else data.get("versionId", data.get("id"))
        if vid is None:
            raise InvalidInputError("Snapshot record has no version id")

        raw_elements = data.get("elements")
        if raw_elements is None:
            raw_elements = []
        if not isinstance(raw_elements, list):
            raise InvalidInputError(f"Snapshot {vid!r} elements must be a list")

        return cls(
            version_id=vid,
            elements=[Element.from_dict(e) for e in raw_elements],
            name=data.get("name"),
        )

    @classmethod
    def from_elements(
        cls,
        version_id: VersionId,
        elements: Sequence[Union[Element, Dict[str, Any]]],
        name: Optional[str] = None,
    ) -> "ElementSnapshot":
        """Build a snapshot from elements or element records."""
        return cls(
            version_id=version_id,
            elements=[e if isinstance(e, Element) else Element.from_dict(e) for e in elements],
            name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "versionId": self.version_id,
            "elements": [e.to_dict() for e in self.elements],
        }
        if self.name is not None:
            data["name"] = self.name
        return data


class SnapshotLoader:
    """Load snapshots from JSON files."""

    def load(self, path: Union[str, Path], version_id: Optional[VersionId] = None) -> ElementSnapshot:
        """
        Load a snapshot file.

        The file holds either a bare element list, in which case the version
        id defaults to the file stem, or a ``{"versionId", "elements"}`` object.

        Args:
            path: Path to the JSON file
            version_id: Version id to assign

        Returns:
            Loaded snapshot
        """
        path = Path(path)
        if not path.is_file():
            raise InvalidInputError(f"Snapshot file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidInputError(f"Snapshot file {path} is not valid JSON: {e}") from e

        if isinstance(data, list):
            snapshot = ElementSnapshot.from_elements(
                version_id if version_id is not None else path.stem,
                data,
            )
        elif isinstance(data, dict):
            if version_id is None and "versionId" not in data and "id" not in data:
                version_id = path.stem
            snapshot = ElementSnapshot.from_dict(data, version_id=version_id)
        else:
            raise InvalidInputError(f"Unrecognized snapshot layout in {path}")

        logger.debug("Loaded snapshot %r with %d elements from %s", snapshot.version_id, len(snapshot), path)
        return snapshot

    def save(self, snapshot: ElementSnapshot, path: Union[str, Path]) -> Path:
        """Write a snapshot as a JSON file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, indent=2)
        return path


def load_snapshot(path: Union[str, Path], version_id: Optional[VersionId] = None) -> ElementSnapshot:
    """
    Load a snapshot from a JSON file.

    Args:
        path: Path to snapshot
        version_id: Version id to assign

    Returns:
        Loaded snapshot
    """
    return SnapshotLoader().load(path, version_id)


class SnapshotProvider:
    """Source of snapshots keyed by version id.

    Implementations return ``None`` for unknown versions.
    """

    def get_snapshot(self, version_id: VersionId) -> Optional[ElementSnapshot]:
        raise NotImplementedError


class InMemorySnapshotProvider(SnapshotProvider):
    """Snapshots held in a dict."""

    def __init__(self, snapshots: Optional[Sequence[ElementSnapshot]] = None):
        self._snapshots: Dict[VersionId, ElementSnapshot] = {}
        for snapshot in snapshots or []:
            self.add(snapshot)

    def add(self, snapshot: ElementSnapshot) -> None:
        self._snapshots[snapshot.version_id] = snapshot

    def get_snapshot(self, version_id: VersionId) -> Optional[ElementSnapshot]:
        return self._snapshots.get(version_id)


class DirectorySnapshotProvider(SnapshotProvider):
    """One ``<version_id>.json`` file per snapshot."""

    def __init__(self, directory: Union[str, Path], loader: Optional[SnapshotLoader] = None):
        self.directory = Path(directory)
        self.loader = loader or SnapshotLoader()

    def get_snapshot(self, version_id: VersionId) -> Optional[ElementSnapshot]:
        path = self.directory / f"{version_id}.json"
        if not path.is_file():
            return None
        return self.loader.load(path, version_id=version_id)


def fetch_snapshots(
    provider: SnapshotProvider,
    version_ids: Sequence[VersionId],
    max_workers: Optional[int] = None,
) -> List[ElementSnapshot]:
    """
    Fetch several snapshots concurrently.

    Args:
        provider: Snapshot provider
        version_ids: Versions to fetch
        max_workers: Thread pool size

    Returns:
        Snapshots in the requested order

    Raises:
        InvalidInputError: If any version is unknown
    """
    if not version_ids:
        return []

    workers = max_workers or min(8, len(version_ids))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(provider.get_snapshot, vid) for vid in version_ids]
        snapshots = [future.result() for future in futures]

    missing = [vid for vid, snapshot in zip(version_ids, snapshots) if snapshot is None]
    if missing:
        raise InvalidInputError(f"Snapshots not found for versions: {missing}")

    return snapshots
