"""
Result shapes returned by the master.

Every response body wraps its payload in a single-field envelope holding a
list.  :class:`Result` is the decoded envelope; the job handle classes are the
payloads of asynchronous invocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .errors import ProtocolError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Decoded ``{"return": [...]}`` envelope."""

    result: List[T] = field(default_factory=list)

    def unwrap(self) -> T:
        """Return the first element, failing if the master sent none."""
        if not self.result:
            raise ProtocolError("Response envelope holds no result")
        return self.result[0]

    def unwrap_single(self) -> T:
        """Return the only element, failing unless there is exactly one."""
        if len(self.result) != 1:
            raise ProtocolError(f"Expected exactly one result in envelope, got {len(self.result)}")
        return self.result[0]


@dataclass(frozen=True)
class RunnerAsyncResult:
    """Job scheduled through the ``runner_async`` client."""

    jid: str
    tag: Optional[str] = None
    result_type: Any = None

    def with_type(self, result_type: Any) -> "RunnerAsyncResult":
        return replace(self, result_type=result_type)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"jid": self.jid}
        if self.tag:
            data["tag"] = self.tag
        return data


@dataclass(frozen=True)
class LocalAsyncResult:
    """Job scheduled through the ``local_async`` client."""

    jid: str
    minions: List[str] = field(default_factory=list)
    result_type: Any = None

    def with_type(self, result_type: Any) -> "LocalAsyncResult":
        return replace(self, result_type=result_type)

    def to_dict(self) -> Dict[str, Any]:
        return {"jid": self.jid, "minions": list(self.minions)}


@dataclass(frozen=True)
class Token:
    """Session token issued by ``/login``."""

    token: str
    start: float = 0.0
    expire: float = 0.0
    user: str = ""
    eauth: str = ""
    perms: List[Any] = field(default_factory=list)
