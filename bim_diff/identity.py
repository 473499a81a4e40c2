"""Element identity resolution between two snapshots."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging

from .errors import AmbiguousIdentityError, InvalidInputError
from .snapshot import Element, ElementSnapshot

logger = logging.getLogger(__name__)

# ("global", globalId) or ("express", expressId); the two key spaces never collide.
IdentityKey = Tuple[str, Any]


def identity_key(element: Element) -> IdentityKey:
    """
    Stable identity key of an element.

    Args:
        element: Element

    Returns:
        globalId key when present, expressId key otherwise

    Raises:
        InvalidInputError: If the element has neither id
    """
    if element.global_id:
        return ("global", element.global_id)
    if element.express_id is not None:
        return ("express", element.express_id)
    raise InvalidInputError(
        f"Element of type {element.type!r} (name={element.name!r}) has neither globalId nor expressId"
    )


def format_key(key: IdentityKey) -> str:
    """Human-readable form of an identity key."""
    kind, value = key
    return f"{kind}:{value}"


@dataclass
class AmbiguousIdentityWarning:
    """Duplicate identity key within one snapshot; the first occurrence was kept."""

    version_id: Any
    key: IdentityKey
    kept_express_id: Optional[int]
    dropped_express_id: Optional[int]

    @property
    def message(self) -> str:
        return (
            f"Duplicate identity {format_key(self.key)} in version {self.version_id!r}: "
            f"kept expressId {self.kept_express_id}, ignored expressId {self.dropped_express_id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": "ambiguousIdentity",
            "versionId": self.version_id,
            "key": format_key(self.key),
            "keptExpressId": self.kept_express_id,
            "droppedExpressId": self.dropped_express_id,
            "message": self.message,
        }


@dataclass
class IdentityMatch:
    """Partition of two snapshots into matched and unmatched elements."""

    matched: List[Tuple[Element, Element]] = field(default_factory=list)
    unmatched_old: List[Element] = field(default_factory=list)
    unmatched_new: List[Element] = field(default_factory=list)
    warnings: List[AmbiguousIdentityWarning] = field(default_factory=list)


class IdentityResolver:
    """Match elements of two snapshots by stable identity key."""

    def __init__(self, strict: bool = False):
        """
        Initialize resolver.

        Args:
            strict: Raise on duplicate identity keys instead of warning
        """
        self.strict = strict

    def index(
        self,
        snapshot: ElementSnapshot,
        warnings: List[AmbiguousIdentityWarning],
    ) -> Dict[IdentityKey, Element]:
        """Index a snapshot by identity key, first occurrence wins."""
        index: Dict[IdentityKey, Element] = {}

        for element in snapshot.elements:
            key = identity_key(element)
            kept = index.get(key)
            if kept is None:
                index[key] = element
                continue

            warning = AmbiguousIdentityWarning(
                version_id=snapshot.version_id,
                key=key,
                kept_express_id=kept.express_id,
                dropped_express_id=element.express_id,
            )
            if self.strict:
                raise AmbiguousIdentityError(warning.message, key=key, version_id=snapshot.version_id)
            logger.warning(warning.message)
            warnings.append(warning)

        return index

    def resolve(self, old: ElementSnapshot, new: ElementSnapshot) -> IdentityMatch:
        """
        Partition elements of two snapshots.

        Matched pairs follow new snapshot order, unmatched old elements follow
        old snapshot order and unmatched new elements follow new snapshot order.

        Args:
            old: Old/base snapshot
            new: New snapshot

        Returns:
            Identity match
        """
        if old is None or new is None:
            raise InvalidInputError("Both snapshots are required for a comparison")

        warnings: List[AmbiguousIdentityWarning] = []
        old_index = self.index(old, warnings)
        new_index = self.index(new, warnings)

        match = IdentityMatch(warnings=warnings)

        for key, new_element in new_index.items():
            old_element = old_index.get(key)
            if old_element is None:
                match.unmatched_new.append(new_element)
            else:
                match.matched.append((old_element, new_element))

        for key, old_element in old_index.items():
            if key not in new_index:
                match.unmatched_old.append(old_element)

        return match
