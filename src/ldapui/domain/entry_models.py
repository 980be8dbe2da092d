from __future__ import annotations

"""
Entry Domain Data Models.

The single editable entry held by a session, plus the alert object used
to surface outcomes to the presentation layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

OBJECT_CLASS = "objectClass"

# -----------------------------------------------------------------------------
# EDITABLE ENTRY
# -----------------------------------------------------------------------------

@dataclass
class Entry:
    """
    A directory entry loaded into (or synthesized for) the editor.

    Attributes:
        dn: Hierarchical identifier.
        attrs: Attribute name to ordered list of values.
        required: Required attribute names, first-seen order.
        aux: Auxiliary class names added to a new draft.
        changed: Attribute names modified by the last write.
        is_new: Whether the entry has not been written to the server yet.
    """
    dn: str
    attrs: Dict[str, List[str]] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    aux: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)
    is_new: bool = False

    @property
    def object_classes(self) -> List[str]:
        """Applied object classes, leaf-to-root for synthesized drafts."""
        return self.attrs.setdefault(OBJECT_CLASS, [])

    def has_value(self, name: str) -> bool:
        """True if the attribute holds at least one non-empty value."""
        return any(v for v in self.attrs.get(name, []))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """
        Build an entry from a ``fetch_entry`` / ``rename_entry`` response.

        The service returns ``{"meta": {"dn", "required", "aux"}, "attrs": {...}}``.
        """
        meta = data.get("meta", {})
        attrs = {k: list(v) for k, v in (data.get("attrs") or {}).items()}
        return cls(
            dn=str(meta.get("dn", data.get("dn", ""))),
            attrs=attrs,
            required=list(meta.get("required") or []),
            aux=list(meta.get("aux") or []),
        )

# -----------------------------------------------------------------------------
# USER FEEDBACK
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Alert:
    """
    Status message for the presentation layer.

    Attributes:
        kind: One of ``success``, ``warning`` or ``danger``.
        message: Text to display.
        counter: Seconds the message should stay visible.
    """
    kind: str
    message: str
    counter: int


def info_alert(message: str) -> Alert:
    return Alert(kind="success", message=message, counter=5)


def warning_alert(message: str) -> Alert:
    return Alert(kind="warning", message=f"⚠️ {message}", counter=10)


def error_alert(message: str) -> Alert:
    return Alert(kind="danger", message=f"⛔ {message}", counter=60)
