"""Read-only view over a completed HTTP response."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Mapping, Optional, Union

from .exceptions import ResponseStatusError
from .status_codes import status_flags, status_name


@dataclass(frozen=True)
class Response:
    """Transport response with status range helpers.

    ``status`` maps every known status name to a boolean; only the entry for
    ``status_code`` is ``True`` (none is, for codes missing from the table).
    """

    raw: Any = field(repr=False)
    status_code: int
    headers: Mapping[str, str]
    body: Any = field(repr=False)
    url: Optional[str] = None
    method: Optional[str] = None
    status: Mapping[str, bool] = field(default_factory=dict, repr=False)

    @classmethod
    def from_raw(cls, raw: Any) -> "Response":
        status_code = int(raw.status_code)
        return cls(
            raw=raw,
            status_code=status_code,
            headers=raw.headers,
            body=raw.body,
            url=getattr(raw, "url", None),
            method=getattr(raw, "method", None),
            status=status_flags(status_code),
        )

    @property
    def status_class(self) -> int:
        """Status range digit: 2 for 2xx, 4 for 4xx and so on."""
        return self.status_code // 100

    @property
    def is_informational(self) -> bool:
        return self.status_class == 1

    @property
    def is_ok(self) -> bool:
        return self.status_class == 2

    @property
    def is_client_error(self) -> bool:
        return self.status_class == 4

    @property
    def is_server_error(self) -> bool:
        return self.status_class == 5

    @cached_property
    def error(self) -> Union[bool, Any, ResponseStatusError]:
        """``False`` unless this is a 4xx/5xx response.

        For error responses the body is returned when it is truthy, otherwise a
        :class:`ResponseStatusError` naming the status. The error is returned,
        never raised.
        """

        if not (self.is_client_error or self.is_server_error):
            return False
        if self.body:
            return self.body
        label = status_name(self.status_code) or self.status_class
        return ResponseStatusError(f"Response got {label}", status_code=self.status_code)


__all__ = ["Response"]
