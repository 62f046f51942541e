"""
Call descriptors for salt-api.

A descriptor names one remote function, the keyword arguments to pass and the
shape the result must be decoded into.  It performs no I/O itself: the
``call_sync``/``call_async`` methods hand the descriptor to a
:class:`~salt_netapi.client.SaltClient`, which owns the HTTP exchange.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Generic, Mapping, Optional, Sequence, TypeVar, Union

from .auth import AuthModule
from .results import LocalAsyncResult, Result, RunnerAsyncResult

if TYPE_CHECKING:  # pragma: no cover
    from .client import SaltClient

R = TypeVar("R")

TOKEN_ENDPOINT = "/"
CREDENTIALS_ENDPOINT = "/run"


class Client(str, Enum):
    """netapi client kinds, sent as the ``client`` field of a lowstate chunk."""

    LOCAL = "local"
    LOCAL_ASYNC = "local_async"
    RUNNER = "runner"
    RUNNER_ASYNC = "runner_async"


def _credentials(
    username: Optional[str],
    password: Optional[str],
    auth_module: Union[AuthModule, str, None],
) -> Optional[Dict[str, Any]]:
    supplied = [value is not None for value in (username, password, auth_module)]
    if not any(supplied):
        return None
    if not all(supplied):
        raise ValueError("username, password and auth_module must be given together")
    return {
        "username": username,
        "password": password,
        "eauth": AuthModule(auth_module).value,
    }


def _hashable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return frozenset((key, _hashable(item)) for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(_hashable(item) for item in value)
    if isinstance(value, set):
        return frozenset(_hashable(item) for item in value)
    return value


@dataclass(frozen=True)
class Call(Generic[R]):
    """
    A remote function invocation: ``<module>.<function>`` plus keyword arguments.

    ``result_type`` is any type expression pydantic can validate against
    (a dataclass, ``List[...]``, ``Dict[str, ...]``, a builtin or ``Any``).

    The keyword arguments are copied on construction, so later changes to the
    caller's mapping or to a returned payload never reach the descriptor.
    """

    function: str
    kwargs: Optional[Mapping[str, Any]] = None
    result_type: Any = Any

    sync_client: ClassVar[Client] = Client.RUNNER
    async_client: ClassVar[Client] = Client.RUNNER_ASYNC

    def __post_init__(self) -> None:
        if not self.function:
            raise ValueError("function name must not be empty")
        if self.kwargs is not None:
            object.__setattr__(self, "kwargs", MappingProxyType(copy.deepcopy(dict(self.kwargs))))

    def __hash__(self) -> int:
        return hash((type(self), tuple(_hashable(getattr(self, f.name)) for f in fields(self))))

    def payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"fun": self.function}
        if self.kwargs is not None:
            payload["kwargs"] = copy.deepcopy(dict(self.kwargs))
        return payload

    def call_async(
        self,
        client: "SaltClient",
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth_module: Union[AuthModule, str, None] = None,
    ) -> RunnerAsyncResult:
        """
        Schedule the function on the master and return the job handle.

        Without credentials the client's session token is used (login first);
        with credentials the request authenticates inline and no session is created.
        """
        envelope = self._dispatch(
            client,
            self.async_client,
            _credentials(username, password, auth_module),
            None,
            RunnerAsyncResult,
        )
        return envelope.unwrap_single().with_type(self.result_type)

    def call_sync(
        self,
        client: "SaltClient",
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth_module: Union[AuthModule, str, None] = None,
    ) -> R:
        """Run the function on the master and block until its result is returned."""
        envelope = self._dispatch(
            client,
            self.sync_client,
            _credentials(username, password, auth_module),
            None,
            self.result_type,
        )
        return envelope.unwrap()

    def _dispatch(
        self,
        client: "SaltClient",
        client_kind: Client,
        credentials: Optional[Dict[str, Any]],
        extra_args: Optional[Dict[str, Any]],
        result_type: Any,
    ) -> Result:
        custom_args: Dict[str, Any] = dict(extra_args or {})
        if credentials:
            custom_args.update(credentials)
            endpoint = CREDENTIALS_ENDPOINT
        else:
            endpoint = TOKEN_ENDPOINT
        return client.call(self, client_kind, endpoint, custom_args or None, result_type)


@dataclass(frozen=True)
class RunnerCall(Call[R]):
    """Function of a runner module, executed on the master itself."""

    __hash__ = Call.__hash__


@dataclass(frozen=True)
class LocalCall(Call[R]):
    """
    Function of an execution module, executed on the targeted minions.

    Results come back keyed by minion id.  The target is chosen per invocation
    and is never part of :meth:`payload`.
    """

    arg: Optional[Sequence[Any]] = None

    sync_client: ClassVar[Client] = Client.LOCAL
    async_client: ClassVar[Client] = Client.LOCAL_ASYNC

    __hash__ = Call.__hash__

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.arg is not None:
            object.__setattr__(self, "arg", tuple(copy.deepcopy(list(self.arg))))

    def payload(self) -> Dict[str, Any]:
        payload = super().payload()
        if self.arg is not None:
            payload["arg"] = copy.deepcopy(list(self.arg))
        return payload

    def call_async(
        self,
        client: "SaltClient",
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth_module: Union[AuthModule, str, None] = None,
        *,
        target: str = "*",
        target_type: str = "glob",
    ) -> LocalAsyncResult:
        envelope = self._dispatch(
            client,
            self.async_client,
            _credentials(username, password, auth_module),
            {"tgt": target, "tgt_type": target_type},
            LocalAsyncResult,
        )
        return envelope.unwrap_single().with_type(self.result_type)

    def call_sync(
        self,
        client: "SaltClient",
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth_module: Union[AuthModule, str, None] = None,
        *,
        target: str = "*",
        target_type: str = "glob",
    ) -> Dict[str, R]:
        envelope = self._dispatch(
            client,
            self.sync_client,
            _credentials(username, password, auth_module),
            {"tgt": target, "tgt_type": target_type},
            Dict[str, self.result_type],
        )
        return envelope.unwrap()
