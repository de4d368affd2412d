# File: src/steel_framing_generator/errors.py
"""
Error types for stud network solving.

Every failure raised while building a structure is geometric and cannot be
recovered from locally: the input line network has to be fixed. Each error
therefore carries a human-readable detail message plus an ``extra`` dict
holding the member and connection indices needed to locate the problem.
"""

from typing import Any, Dict, Iterable, Optional, Tuple


class FramingError(Exception):
    """
    Base class for stud network errors.

    Attributes:
        detail: Human-readable error message
        extra: Structured context (member ids, connection pairs, phases)
    """

    def __init__(self, detail: str, extra: Optional[Dict[str, Any]] = None):
        self.detail = detail
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logs or host-side reporting."""
        result = {"error": type(self).__name__, "detail": self.detail}
        if self.extra:
            result["extra"] = dict(self.extra)
        return result


class UnclassifiableJointError(FramingError):
    """Raised when an edge cannot be assigned one of the four connection types."""

    def __init__(self, member_a: int, member_b: int, reason: str):
        self.member_a = member_a
        self.member_b = member_b
        super().__init__(
            f"Cannot classify joint between members {member_a} and {member_b}: {reason}",
            extra={"members": [member_a, member_b], "reason": reason},
        )


class NormalConflictError(FramingError):
    """Raised when the web-normal candidates of a member have no common direction."""

    def __init__(self, member_index: int, connection_members: Tuple[int, int]):
        self.member_index = member_index
        self.connection_members = tuple(connection_members)
        super().__init__(
            f"No web normal satisfies every connection of member {member_index} "
            f"(conflict at connection {self.connection_members[0]}-{self.connection_members[1]})",
            extra={
                "member": member_index,
                "connection": list(self.connection_members),
            },
        )


class DisconnectedGraphError(FramingError):
    """Raised when members cannot be reached from the seed member."""

    def __init__(self, unreached: Iterable[int]):
        self.unreached = sorted(unreached)
        preview = ", ".join(str(i) for i in self.unreached[:10])
        if len(self.unreached) > 10:
            preview += ", ..."
        super().__init__(
            f"{len(self.unreached)} member(s) are not connected to member 0: {preview}",
            extra={"unreached": list(self.unreached)},
        )


class DegenerateGeometryError(FramingError):
    """Raised when zero-length axes or zero denominators would produce NaN geometry."""

    def __init__(self, member_id: Optional[str], reason: str):
        self.member_id = member_id
        target = f"member {member_id}" if member_id is not None else "geometry"
        super().__init__(
            f"Degenerate {target}: {reason}",
            extra={"member": member_id, "reason": reason},
        )


class ResolutionError(FramingError):
    """Raised when a joint resolution phase is invoked more than once."""

    def __init__(self, phase: str, reason: Optional[str] = None):
        self.phase = phase
        if reason is None:
            reason = (
                "it has already run on this structure; "
                "running it again would trim member axes twice"
            )
        super().__init__(
            f"Cannot run phase '{phase}': {reason}",
            extra={"phase": phase, "reason": reason},
        )
