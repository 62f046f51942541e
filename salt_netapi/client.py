"""HTTP client for a Salt master's netapi (salt-api)."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .auth import AuthModule
from .config import Settings, get_settings
from .errors import AuthenticationError, ProtocolError, SerializationError, TransportError
from .results import Result, Token

if TYPE_CHECKING:  # pragma: no cover
    from .calls import Call, Client

ENVELOPE_KEYS = ("return", "result")


@lru_cache(maxsize=128)
def _list_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(List[result_type])


def _read_envelope(body: Any) -> list:
    if not isinstance(body, dict):
        raise ProtocolError(f"Response envelope must be an object, got {type(body).__name__}")
    for key in ENVELOPE_KEYS:
        if key in body:
            items = body[key]
            break
    else:
        raise ProtocolError("Response envelope has no 'return' field")
    if not isinstance(items, list):
        raise ProtocolError(f"Response envelope must hold a list, got {type(items).__name__}")
    return items


def decode_envelope(body: Any, result_type: Any = Any) -> Result:
    """Decode a raw response body into a :class:`Result` of ``result_type`` items."""
    items = _read_envelope(body)
    try:
        decoded = _list_adapter(result_type).validate_python(items)
    except ValidationError as exc:
        raise SerializationError(f"Response does not match {result_type!r}: {exc}") from exc
    return Result(result=decoded)


class SaltClient:
    """
    Blocking connection to salt-api.

    Holds one pooled :class:`httpx.Client` and, after :meth:`login`, the session
    token sent as ``X-Auth-Token``.  Safe to share between threads.
    """

    def __init__(
        self,
        url: str,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if timeout is None or verify is None:
            settings = get_settings()
            timeout = settings.timeout if timeout is None else timeout
            verify = settings.verify_ssl if verify is None else verify
        self.url = url.rstrip("/")
        self.token = token
        self._http = httpx.Client(
            base_url=self.url,
            timeout=timeout,
            verify=verify,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "SaltClient":
        settings = settings or get_settings()
        kwargs.setdefault("timeout", settings.timeout)
        kwargs.setdefault("verify", settings.verify_ssl)
        return cls(settings.url, **kwargs)

    def __enter__(self) -> "SaltClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self._http.close()

    # --- session -------------------------------------------------------

    def login(self, username: str, password: str, auth_module: Union[AuthModule, str] = AuthModule.AUTO) -> Token:
        """Authenticate against ``/login`` and keep the issued token for later calls."""
        eauth = AuthModule(auth_module).value
        logger.debug(f"salt-api login as {username} (eauth={eauth})")
        body = self._post("/login", {"username": username, "password": password, "eauth": eauth})
        token = decode_envelope(body, Token).unwrap()
        self.token = token.token
        return token

    def logout(self) -> None:
        """Invalidate the current session token on the master."""
        if self.token is None:
            return
        self._post("/logout", {})
        logger.debug("salt-api session closed")
        self.token = None

    # --- calls ---------------------------------------------------------

    def call(
        self,
        call: "Call",
        client_kind: "Client",
        endpoint: str,
        custom_args: Optional[Dict[str, Any]] = None,
        result_type: Any = Any,
    ) -> Result:
        """
        Send one lowstate chunk built from ``call`` and decode the envelope.

        The chunk is ``{"client": ..., **call.payload(), **custom_args}`` posted
        as a single-element JSON list to ``endpoint``.
        """
        chunk: Dict[str, Any] = {"client": client_kind.value}
        chunk.update(call.payload())
        if custom_args:
            chunk.update(custom_args)
        logger.debug(f"salt-api {client_kind.value} {call.function} -> {endpoint}")
        body = self._post(endpoint, [chunk])
        return decode_envelope(body, result_type)

    # --- internals -----------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"X-Auth-Token": self.token}
        return {}

    def _post(self, path: str, json_body: Any) -> Any:
        try:
            response = self._http.post(path, json=json_body, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise TransportError(f"salt-api timeout: POST {path}") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"salt-api network error: POST {path}: {exc}") from exc

        status_code = response.status_code
        if status_code == 401:
            logger.warning(f"salt-api rejected authentication for POST {path}")
            raise AuthenticationError(f"salt-api authentication failed: POST {path}", status_code=status_code)
        if not response.is_success:
            logger.warning(f"salt-api http error {status_code} for POST {path}")
            message = response.text.strip()[:200] or response.reason_phrase
            raise TransportError(f"salt-api http error {status_code}: {message}", status_code=status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(f"salt-api bad response: non-json body for POST {path}") from exc
