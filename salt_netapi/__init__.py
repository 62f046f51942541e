"""
Client library for the HTTP API of a Salt master.

Call descriptors describe one remote function and the shape of its result;
:class:`SaltClient` performs the HTTP exchange and decodes the response
envelope.  Typed bindings for individual Salt modules live in
:mod:`salt_netapi.modules`.
"""

from loguru import logger

from .auth import AuthModule  # noqa: F401
from .calls import Call, Client, LocalCall, RunnerCall  # noqa: F401
from .client import SaltClient  # noqa: F401
from .config import Settings, configure_settings, get_settings  # noqa: F401
from .errors import AuthenticationError, ProtocolError, SaltError, SerializationError, TransportError  # noqa: F401
from .results import LocalAsyncResult, Result, RunnerAsyncResult, Token  # noqa: F401

logger.disable("salt_netapi")
