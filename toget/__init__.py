"""Fluent, promise-style request builder over an HTTP transport."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

# Semantic version for package consumers.
__version__ = "1.0.0"

from .exceptions import (  # noqa: E402
    InvalidArgument,
    PathTemplateError,
    ResponseStatusError,
    StatusTableError,
    TogetError,
    TransportFailure,
    TransportNotBound,
)
from .request import RequestBuilder  # noqa: E402
from .response import Response  # noqa: E402
from .transport import RawResponse, RequestsTransport, default_transport  # noqa: E402

BuilderFactory = Callable[..., RequestBuilder]


def toget(transport: Optional[Callable[..., Any]] = None) -> Callable[[str], BuilderFactory]:
    """Return ``bind(host)`` producing per-request builders for ``host``.

    ``bind(host)(path, params)`` is a GET builder for ``path``;
    ``bind(host)()`` is a bare builder. Without an explicit transport the
    process-wide :func:`default_transport` is used.
    """

    def bind(host: str) -> BuilderFactory:
        def make(
            path: Optional[str] = None, params: Optional[Mapping[str, Any]] = None
        ) -> RequestBuilder:
            builder = RequestBuilder(host).upon(transport or default_transport())
            if path:
                return builder.get(path, params)
            return builder

        return make

    return bind


__all__ = [
    "__version__",
    "toget",
    "InvalidArgument",
    "PathTemplateError",
    "RawResponse",
    "RequestBuilder",
    "RequestsTransport",
    "Response",
    "ResponseStatusError",
    "StatusTableError",
    "TogetError",
    "TransportFailure",
    "TransportNotBound",
    "default_transport",
]
