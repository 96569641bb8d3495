"""HTTP transport capability backed by :mod:`requests`.

A transport is any callable ``transport(options, callback)`` that performs the
request described by ``options`` and calls ``callback(error, raw_response)``
exactly once. :class:`RequestsTransport` is the bundled implementation; tests
and callers may bind any other callable with the same shape.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from http.cookiejar import CookieJar
from typing import Any, Callable, Mapping, MutableMapping, Optional

import requests
from requests import exceptions as requests_exceptions

from .config import Settings, load_settings
from .exceptions import TransportFailure
from .logging_utils import redact_headers

LOGGER = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Optional["RawResponse"]], None]
Transport = Callable[..., Any]

# Sentinel distinguishing "encoding never configured" from ``encoding(None)``.
_UNSET = object()


@dataclass
class RawResponse:
    """Plain response record handed from a transport to the builder."""

    status_code: int
    headers: Mapping[str, str]
    body: Any = None
    url: Optional[str] = None
    method: Optional[str] = None


def _decode_body(response: requests.Response, options: Mapping[str, Any]) -> Any:
    encoding = options.get("encoding", _UNSET)
    if encoding is None:
        return response.content
    if encoding is _UNSET:
        text = response.text
    else:
        text = response.content.decode(encoding, errors="replace")
    if options.get("json") and text:
        try:
            return response.json() if encoding is _UNSET else json.loads(text)
        except ValueError:
            return text
    return text


def _merge_cookies(jar: Any, response: requests.Response) -> None:
    if not isinstance(jar, CookieJar):
        return
    for cookie in response.cookies:
        jar.set_cookie(cookie)


class RequestsTransport:
    """Run ``requests`` calls on a worker pool and report via callback."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        max_workers: Optional[int] = None,
        default_timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent
        self.default_timeout_ms = default_timeout_ms
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="toget-transport"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestsTransport":
        return cls(
            max_workers=settings.max_workers,
            default_timeout_ms=settings.timeout_ms,
            user_agent=settings.user_agent,
        )

    def request_kwargs(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Translate an options descriptor into ``Session.request`` arguments."""

        headers: MutableMapping[str, str] = dict(options.get("headers") or {})
        kwargs: dict[str, Any] = {
            "method": options.get("method", "GET"),
            "url": options["url"],
            "headers": headers,
        }

        if options.get("json"):
            headers.setdefault("Accept", "application/json")
        if options.get("gzip"):
            headers.setdefault("Accept-Encoding", "gzip, deflate")

        if "body" in options:
            body = options["body"]
            if options.get("json") and not isinstance(body, (str, bytes)):
                kwargs["json"] = body
            else:
                kwargs["data"] = body

        timeout_ms = options.get("timeout", self.default_timeout_ms)
        if timeout_ms is not None:
            kwargs["timeout"] = timeout_ms / 1000.0

        if options.get("jar") is not None:
            kwargs["cookies"] = options["jar"]
        return kwargs

    def _send(self, options: Mapping[str, Any], stream: bool = False) -> requests.Response:
        kwargs = self.request_kwargs(options)
        if stream:
            kwargs["stream"] = True
        LOGGER.debug(
            "Sending %s %s",
            kwargs["method"],
            kwargs["url"],
            extra={"headers": redact_headers(kwargs["headers"])},
        )
        try:
            return self.session.request(**kwargs)
        except requests_exceptions.Timeout as exc:
            LOGGER.warning("Request to %s timed out: %s", kwargs["url"], exc)
            raise TransportFailure(str(exc), timed_out=True) from exc
        except requests_exceptions.RequestException as exc:
            LOGGER.warning("Request to %s failed: %s", kwargs["url"], exc)
            raise TransportFailure(str(exc)) from exc

    def to_raw(self, response: requests.Response, options: Mapping[str, Any]) -> RawResponse:
        _merge_cookies(options.get("jar"), response)
        return RawResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=_decode_body(response, options),
            url=response.url,
            method=response.request.method if response.request is not None else None,
        )

    def __call__(
        self, options: Mapping[str, Any], callback: Optional[Callback] = None
    ) -> "Future[requests.Response]":
        """Dispatch the request; the returned future is the live handle.

        Without a callback the response is opened with ``stream=True`` so the
        handle's body can be consumed with ``iter_content()`` or ``raw``.
        """

        handle: Future[requests.Response] = self._executor.submit(
            self._send, options, callback is None
        )
        if callback is not None:
            handle.add_done_callback(lambda done: self._deliver(done, options, callback))
        return handle

    def _deliver(
        self, done: "Future[requests.Response]", options: Mapping[str, Any], callback: Callback
    ) -> None:
        error = done.exception()
        if error is not None:
            callback(error, None)
            return
        try:
            raw = self.to_raw(done.result(), options)
        except Exception as exc:
            failure = TransportFailure(f"Unable to read response body: {exc}")
            failure.__cause__ = exc
            callback(failure, None)
            return
        callback(None, raw)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self.session.close()


_DEFAULT_TRANSPORT: Optional[RequestsTransport] = None
_DEFAULT_LOCK = threading.Lock()


def default_transport() -> RequestsTransport:
    """Return the process-wide transport configured from the environment."""

    global _DEFAULT_TRANSPORT
    with _DEFAULT_LOCK:
        if _DEFAULT_TRANSPORT is None:
            _DEFAULT_TRANSPORT = RequestsTransport.from_settings(load_settings())
        return _DEFAULT_TRANSPORT


__all__ = ["RawResponse", "RequestsTransport", "Transport", "default_transport"]
