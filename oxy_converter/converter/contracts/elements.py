"""
Elements - Output tree structures produced by the converter.

- PropertyTree: validated nested property map with deep-merge semantics
- BuilderElement: one node of the output element tree

The wire format expected by the page builder is:

    {"id": 1, "data": {"type": "...", "properties": {...}}, "children": [...]}

BuilderElement.to_dict() produces exactly that shape.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

from .element_types import ElementType


PathLike = Union[str, Sequence[str]]


def deep_merge(base: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge ``incoming`` into ``base`` in place.

    Mappings on both sides are merged recursively; any other value in
    ``incoming`` replaces the value in ``base``.

    Args:
        base: Mapping to update
        incoming: Mapping whose values win on conflict

    Returns:
        The updated ``base``
    """
    for key, value in incoming.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def _split_path(path: PathLike) -> List[str]:
    if isinstance(path, str):
        return path.split(".")
    return list(path)


class PropertyTree:
    """
    Nested property map of one builder element.

    Top-level sections are restricted to ``design`` (style sections and the
    tag option), ``content`` (text, urls, code payloads) and ``settings``
    (classes, id, attributes, interactions, animations).
    """

    SECTIONS = ("design", "content", "settings")

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        if data:
            self.merge(data)

    # =========================================================================
    # ACCESS
    # =========================================================================

    def get(self, path: PathLike, default: Any = None) -> Any:
        """
        Read a value by dotted path.

        Args:
            path: Dotted path ("design.typography.color") or key sequence
            default: Returned when any segment is missing

        Returns:
            The stored value or ``default``
        """
        current: Any = self._data
        for key in _split_path(path):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def has(self, path: PathLike) -> bool:
        """Check if a path exists."""
        marker = object()
        return self.get(path, marker) is not marker

    def set(self, path: PathLike, value: Any) -> None:
        """
        Write a value by dotted path, creating intermediate mappings.

        Raises:
            ValueError: If the top-level key is not a known section or an
                intermediate segment holds a scalar
        """
        keys = _split_path(path)
        self._check_section(keys[0])
        current = self._data
        for key in keys[:-1]:
            child = current.setdefault(key, {})
            if not isinstance(child, dict):
                raise ValueError(f"Cannot descend into scalar at '{key}' for path {'.'.join(keys)}")
            current = child
        current[keys[-1]] = value

    def set_default(self, path: PathLike, value: Any) -> Any:
        """Write a value only if the path is missing. Returns the stored value."""
        if not self.has(path):
            self.set(path, value)
        return self.get(path)

    def remove(self, path: PathLike) -> None:
        """Delete a path if present."""
        keys = _split_path(path)
        parent = self.get(keys[:-1]) if len(keys) > 1 else self._data
        if isinstance(parent, dict):
            parent.pop(keys[-1], None)

    def append(self, path: PathLike, value: Any) -> None:
        """Append to a list stored at ``path`` (created if missing)."""
        current = self.get(path)
        if current is None:
            self.set(path, [value])
        elif isinstance(current, list):
            current.append(value)
        else:
            raise ValueError(f"Path {path} holds a scalar, not a list")

    # =========================================================================
    # MERGING
    # =========================================================================

    def merge(self, other: Union["PropertyTree", Dict[str, Any]]) -> "PropertyTree":
        """
        Deep-merge another tree or mapping into this one.

        Mappings merge recursively, scalars and lists override.
        """
        incoming = other.to_dict() if isinstance(other, PropertyTree) else other
        for key in incoming:
            self._check_section(key)
        deep_merge(self._data, incoming)
        return self

    def merge_design(self, sections: Dict[str, Dict[str, str]]) -> None:
        """Deep-merge style sections (typography, spacing, ...) under ``design``."""
        if sections:
            self.merge({"design": sections})

    # =========================================================================
    # EXPORT
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Deep copy of the underlying mapping."""
        return copy.deepcopy(self._data)

    def is_empty(self) -> bool:
        """Check if no properties are set."""
        return not self._data

    def _check_section(self, key: str) -> None:
        if key not in self.SECTIONS:
            raise ValueError(
                f"Unknown property section '{key}', expected one of {self.SECTIONS}"
            )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PropertyTree):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    def __repr__(self) -> str:
        """String representation."""
        return f"PropertyTree({sorted(self._data)})"


@dataclass
class BuilderElement:
    """
    One node of the output element tree.

    Elements are built without an id; the tree builder numbers the finished
    tree once, in pre-order, so wrappers synthesized after their children
    still precede them.
    """

    type: ElementType
    """Builder element kind."""

    properties: PropertyTree = field(default_factory=PropertyTree)
    """Nested property tree."""

    children: List["BuilderElement"] = field(default_factory=list)
    """Ordered child elements (owned exclusively by this node)."""

    id: Optional[int] = None
    """Unique node id (strictly increasing in document order)."""

    library_key: Optional[str] = None
    """Icon library key for synthesized library-loader elements."""

    def walk(self) -> Iterator["BuilderElement"]:
        """Iterate over this element and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def assign_ids(self, next_id: Callable[[], int]) -> None:
        """Number this subtree in pre-order using ``next_id``."""
        for element in self.walk():
            if element.id is None:
                element.id = next_id()

    def find(self, element_id: int) -> Optional["BuilderElement"]:
        """Find a descendant (or self) by id."""
        for element in self.walk():
            if element.id == element_id:
                return element
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the page builder's wire format."""
        payload: Dict[str, Any] = {
            "id": self.id,
            "data": {
                "type": self.type.value,
                "properties": self.properties.to_dict(),
            },
            "children": [child.to_dict() for child in self.children],
        }
        if self.library_key is not None:
            payload["_libraryKey"] = self.library_key
        return payload

    def __repr__(self) -> str:
        """String representation."""
        return f"BuilderElement(#{self.id} {self.type.short_name}, {len(self.children)} children)"
