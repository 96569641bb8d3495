"""Fluent request builder with memoized, one-shot execution."""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import Future
from typing import Any, Callable, Optional
from urllib.parse import SplitResult, urlencode, urlsplit, urlunsplit

from .exceptions import InvalidArgument, TransportNotBound
from .logging_utils import redact_headers
from .pathtemplate import compile_path
from .response import Response

LOGGER = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT"})


class _State(enum.Enum):
    NOT_STARTED = "not_started"
    PENDING = "pending"
    DONE = "done"


def _chain(
    source: "Future[Any]",
    on_resolved: Optional[Callable[[Any], Any]],
    on_rejected: Optional[Callable[[BaseException], Any]],
) -> "Future[Any]":
    """Return a future settled from ``source`` through the given handlers."""

    chained: Future[Any] = Future()

    def settle(done: "Future[Any]") -> None:
        error = done.exception()
        try:
            if error is None:
                value = done.result()
                chained.set_result(on_resolved(value) if on_resolved else value)
            elif on_rejected is not None:
                chained.set_result(on_rejected(error))
            else:
                chained.set_exception(error)
        except Exception as exc:
            chained.set_exception(exc)

    source.add_done_callback(settle)
    return chained


class RequestBuilder:
    """Accumulate request options through chained calls.

    >>> RequestBuilder("http://localhost:3000").get("/user/:id", {"id": 1}).to_options()
    {'method': 'GET', 'url': 'http://localhost:3000/user/1'}

    Options are finalized once, on the first call to :meth:`to_options`,
    :meth:`to_future` or :meth:`exec`. The transport is invoked at most once
    through :meth:`to_future`; every later subscription shares that outcome.
    """

    def __init__(self, base: str) -> None:
        if not base or not isinstance(base, str):
            raise InvalidArgument('"base" must be a non-empty URL string')

        parsed = urlsplit(base)
        if not parsed.scheme or not parsed.netloc:
            raise InvalidArgument(f"\"base\" must be an absolute URL with a host, got {base!r}")
        # Start from the root; verb calls and query() fill these in.
        self._url: SplitResult = parsed._replace(path="/", query="", fragment="")
        self._options: dict[str, Any] = {}
        self._path_params: Optional[Mapping[str, Any]] = None
        self._query: Any = None
        self._finalized = False
        self.transport: Optional[Callable[..., Any]] = None

        self._lock = threading.Lock()
        self._state = _State.NOT_STARTED
        self._future: Optional[Future[Response]] = None

    def __repr__(self) -> str:
        method = self._options.get("method", "-")
        return f"<RequestBuilder {method} {urlunsplit(self._url)}>"

    def upon(self, transport: Callable[..., Any]) -> "RequestBuilder":
        """Bind the transport used by :meth:`to_future` and :meth:`exec`."""
        self.transport = transport
        return self

    def _method_path(self, method: str, path: str, params: Any) -> "RequestBuilder":
        self._options["method"] = method
        self._url = self._url._replace(path=path)
        if isinstance(params, Mapping):
            self._path_params = params
        return self

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> "RequestBuilder":
        return self._method_path("GET", path, params)

    def post(self, path: str, params: Optional[Mapping[str, Any]] = None) -> "RequestBuilder":
        return self._method_path("POST", path, params)

    def put(self, path: str, params: Optional[Mapping[str, Any]] = None) -> "RequestBuilder":
        return self._method_path("PUT", path, params)

    def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> "RequestBuilder":
        return self._method_path("DELETE", path, params)

    def query(self, qs: Any) -> "RequestBuilder":
        """Set the query string from a mapping or a pre-encoded string."""
        self._query = qs
        return self

    def headers(self, values: Optional[Mapping[str, str]] = None) -> "RequestBuilder":
        self._options["headers"] = values or {}
        return self

    def json(self) -> "RequestBuilder":
        """Send the body as JSON and parse the response body as JSON."""
        self._options["json"] = True
        return self

    def gzip(self) -> "RequestBuilder":
        """Ask the server for compressed content."""
        self._options["gzip"] = True
        return self

    def timeout(self, value: float) -> "RequestBuilder":
        """Milliseconds to wait for the server before the transport gives up."""
        self._options["timeout"] = value
        return self

    def jar(self, value: Any) -> "RequestBuilder":
        self._options["jar"] = value
        return self

    def body(self, data: Any) -> "RequestBuilder":
        """Entity body; only sent for POST and PUT."""
        self._options["body"] = data
        return self

    def encoding(self, value: Optional[str]) -> "RequestBuilder":
        """Response body codec; ``None`` keeps the body as bytes."""
        self._options["encoding"] = value
        return self

    def _query_string(self) -> str:
        qs = self._query
        if qs is None:
            return ""
        if isinstance(qs, str):
            return qs.lstrip("?")
        if isinstance(qs, Mapping):
            return urlencode(qs, doseq=True)
        return urlencode(list(qs), doseq=True)

    def _build_options(self) -> None:
        if self._finalized:
            return

        path = self._url.path
        if self._path_params is not None:
            path = compile_path(path)(self._path_params)
        if not path.startswith("/"):
            path = "/" + path

        if self._options.get("method") not in BODY_METHODS:
            self._options.pop("body", None)

        self._url = self._url._replace(path=path, query=self._query_string())
        self._options["url"] = urlunsplit(self._url)
        self._finalized = True

    def to_options(self) -> dict[str, Any]:
        """Return the finalized options descriptor. Performs no I/O."""
        if not self._finalized:
            self._build_options()
        return self._options

    def _check_transport(self) -> Callable[..., Any]:
        if self.transport is None:
            raise TransportNotBound("RequestBuilder.upon() must be called first with a transport")
        return self.transport

    def to_future(self) -> "Future[Response]":
        """Dispatch the request once and return the shared result future."""

        transport = self._check_transport()
        with self._lock:
            if self._state is not _State.NOT_STARTED:
                assert self._future is not None
                return self._future
            future: Future[Response] = Future()
            future.set_running_or_notify_cancel()
            self._future = future
            self._state = _State.PENDING

        try:
            options = self.to_options()
            LOGGER.debug(
                "Dispatching %s %s",
                options.get("method", "GET"),
                options["url"],
                extra={"headers": redact_headers(options.get("headers") or {})},
            )
            transport(options, self._complete)
        except Exception as exc:
            self._settle(exc, None)
        return future

    def _complete(self, error: Optional[BaseException], raw: Any) -> None:
        if error is not None:
            self._settle(error, None)
            return
        options = self._options
        try:
            if not getattr(raw, "url", None):
                raw.url = options["url"]
            if not getattr(raw, "method", None):
                raw.method = options.get("method")
            response = Response.from_raw(raw)
        except Exception as exc:
            self._settle(exc, None)
            return
        self._settle(None, response)

    def _settle(self, error: Optional[BaseException], response: Optional[Response]) -> None:
        with self._lock:
            future = self._future
            if future is None or self._state is _State.DONE:
                LOGGER.warning("Ignoring repeated transport completion for %r", self)
                return
            self._state = _State.DONE
        if error is not None:
            LOGGER.debug("Request %r failed: %s", self, error)
            future.set_exception(error)
        else:
            LOGGER.debug("Request %r completed with %s", self, response.status_code)
            future.set_result(response)

    def then(
        self,
        on_resolved: Optional[Callable[[Response], Any]] = None,
        on_rejected: Optional[Callable[[BaseException], Any]] = None,
    ) -> "Future[Any]":
        return _chain(self.to_future(), on_resolved, on_rejected)

    def catch(self, on_rejected: Callable[[BaseException], Any]) -> "Future[Any]":
        return _chain(self.to_future(), None, on_rejected)

    def result(self, timeout: Optional[float] = None) -> Response:
        """Block until the response arrives; raises the transport error if any."""
        return self.to_future().result(timeout=timeout)

    def exec(self, callback: Optional[Callable[..., Any]] = None) -> Any:
        """Invoke the transport directly and return its live handle."""

        transport = self._check_transport()
        return transport(self.to_options(), callback)


__all__ = ["RequestBuilder"]
