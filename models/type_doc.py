"""
Documentation-entry model for xyDoc.

A ``TypeDoc`` describes one declared type (class, struct, interface, record,
enum, delegate) together with its members and nested types. The tree is
produced by an extractor and handed to the renderers; here it is loaded from
the JSON the extractor writes.

Usage:
    from models import load_type_docs

    for type_doc in load_type_docs("model.json"):
        for entry in type_doc.flatten_nested():
            print(entry.display_name)
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class ModelLoadError(Exception):
    """The documentation model could not be read or parsed."""


def _norm_key(key: str) -> str:
    """Fold snake_case, camelCase and PascalCase keys onto one spelling."""
    return re.sub(r"[_\-\s]", "", str(key)).lower()


def _normalized(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_norm_key(k): v for k, v in data.items()}


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value]


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@dataclass
class MemberDoc:
    """Single member of a type (field, property, method, ctor, event, enum-member)."""

    kind: str = ""
    signature: str = ""
    modifiers: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemberDoc":
        d = _normalized(data)
        return cls(
            kind=_as_str(d.get("kind")),
            signature=_as_str(d.get("signature")),
            modifiers=_as_str(d.get("modifiers")),
            summary=_as_str(d.get("summary")),
        )


# Member kind -> TypeDoc list attribute
_MEMBER_BUCKETS = {
    "ctor": "constructors",
    "constructor": "constructors",
    "method": "methods",
    "property": "properties",
    "event": "events",
    "field": "fields",
    "enum-member": "fields",
}

_GROUP_KINDS = {
    "constructors": "ctor",
    "methods": "method",
    "properties": "property",
    "events": "event",
    "fields": "field",
}

# Render order of member tables
MEMBER_GROUPS: Tuple[Tuple[str, str], ...] = (
    ("Constructors", "constructors"),
    ("Methods", "methods"),
    ("Properties", "properties"),
    ("Events", "events"),
    ("Fields", "fields"),
)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass
class TypeDoc:
    """A documented type with its members and nested types."""

    kind: str = ""
    name: str = ""
    namespace: str = ""
    modifiers: str = ""
    attributes: List[str] = field(default_factory=list)
    base_types: List[str] = field(default_factory=list)
    summary: str = ""
    file_path: str = ""
    parent: Optional[str] = None
    signature: Optional[str] = None

    constructors: List[MemberDoc] = field(default_factory=list)
    methods: List[MemberDoc] = field(default_factory=list)
    properties: List[MemberDoc] = field(default_factory=list)
    events: List[MemberDoc] = field(default_factory=list)
    fields: List[MemberDoc] = field(default_factory=list)

    nested_types: List["TypeDoc"] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Name including the parent type when nested."""
        if self.parent and self.parent.strip():
            return f"{self.parent}.{self.name}"
        return self.name

    def add_member(self, member: MemberDoc) -> None:
        """Append *member* to the list matching its kind."""
        bucket = _MEMBER_BUCKETS.get(member.kind.strip().lower())
        if bucket is None:
            logger.debug(f"Ignoring member of unknown kind '{member.kind}' on {self.display_name}")
            return
        getattr(self, bucket).append(member)

    def add_nested(self, nested: "TypeDoc") -> None:
        if not nested.parent:
            nested.parent = self.display_name
        self.nested_types.append(nested)

    def flatten_nested(self) -> Iterator["TypeDoc"]:
        """Yield this type, then every nested type, pre-order depth-first."""
        yield self
        for nested in self.nested_types:
            yield from nested.flatten_nested()

    def all_members(self) -> Iterator[MemberDoc]:
        """Yield every member, including those of nested types."""
        yield from self.fields
        yield from self.properties
        yield from self.methods
        yield from self.constructors
        yield from self.events
        for nested in self.nested_types:
            yield from nested.all_members()

    def member_groups(self) -> Iterator[Tuple[str, List[MemberDoc]]]:
        """Yield ``(title, members)`` for each non-empty group in render order."""
        for title, attr in MEMBER_GROUPS:
            members = getattr(self, attr)
            if members:
                yield title, members

    @classmethod
    def from_dict(cls, data: Dict[str, Any], parent: Optional[str] = None) -> "TypeDoc":
        d = _normalized(data)
        type_doc = cls(
            kind=_as_str(d.get("kind")),
            name=_as_str(d.get("name")),
            namespace=_as_str(d.get("namespace")),
            modifiers=_as_str(d.get("modifiers")),
            attributes=_as_str_list(d.get("attributes")),
            base_types=_as_str_list(d.get("basetypes")),
            summary=_as_str(d.get("summary")),
            file_path=_as_str(d.get("filepath")),
            parent=d.get("parent") or parent,
            signature=d.get("signature") or None,
        )

        for _, attr in MEMBER_GROUPS:
            for raw in d.get(_norm_key(attr)) or []:
                member = MemberDoc.from_dict(raw)
                if not member.kind:
                    member.kind = _GROUP_KINDS[attr]
                getattr(type_doc, attr).append(member)

        for raw in d.get("members") or []:
            type_doc.add_member(MemberDoc.from_dict(raw))

        for raw in d.get("nestedtypes") or []:
            type_doc.add_nested(cls.from_dict(raw, parent=type_doc.display_name))

        return type_doc


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_type_docs(path: Union[str, Path]) -> List[TypeDoc]:
    """
    Load top-level type entries from a JSON model file.

    The file may contain a single entry, a list of entries, or an object
    with a ``types`` list.

    Raises:
        ModelLoadError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ModelLoadError(f"Failed to load model '{path}': {e}") from e

    if isinstance(payload, dict):
        items = payload.get("types", payload.get("Types"))
        if items is None:
            items = [payload]
    elif isinstance(payload, list):
        items = payload
    else:
        raise ModelLoadError(f"Unsupported model root in '{path}': {type(payload).__name__}")

    try:
        type_docs = [TypeDoc.from_dict(item) for item in items]
    except (AttributeError, TypeError) as e:
        raise ModelLoadError(f"Malformed type entry in '{path}': {e}") from e

    logger.info(f"Loaded {len(type_docs)} top-level types from {path}")
    return type_docs
