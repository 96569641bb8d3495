"""Compile ``/user/:id`` style path templates into substitution functions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union
from urllib.parse import quote

from .exceptions import PathTemplateError

PathBuilder = Callable[[Mapping[str, object]], str]

# Optional leading slash, the parameter name, an optional (constraint) and an
# optional "?" marking the parameter as omittable.
PARAM_PATTERN = re.compile(
    r"(?P<slash>/?):(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:\((?P<constraint>[^)]*)\))?(?P<optional>\?)?"
)


@dataclass(frozen=True)
class _Param:
    name: str
    prefix: str
    constraint: Optional[re.Pattern[str]]
    optional: bool


Token = Union[str, _Param]


def parse(template: str) -> list[Token]:
    """Split a template into literal strings and parameter tokens."""

    tokens: list[Token] = []
    position = 0
    for match in PARAM_PATTERN.finditer(template):
        if match.start() > position:
            tokens.append(template[position : match.start()])
        constraint = match.group("constraint")
        try:
            compiled = re.compile(constraint) if constraint else None
        except re.error as exc:
            raise PathTemplateError(
                f"Invalid constraint for ':{match.group('name')}' in {template!r}: {exc}"
            ) from exc
        tokens.append(
            _Param(
                name=match.group("name"),
                prefix=match.group("slash"),
                constraint=compiled,
                optional=bool(match.group("optional")),
            )
        )
        position = match.end()
    if position < len(template):
        tokens.append(template[position:])
    return tokens


def compile_path(template: str) -> PathBuilder:
    """Return a function that renders ``template`` from a parameter mapping."""

    tokens = parse(template)

    def build(params: Mapping[str, object]) -> str:
        parts: list[str] = []
        for token in tokens:
            if isinstance(token, str):
                parts.append(token)
                continue
            value = params.get(token.name)
            if value is None:
                if token.optional:
                    continue
                raise PathTemplateError(f"Missing path parameter {token.name!r} for {template!r}")
            text = str(value)
            if token.constraint is not None and not token.constraint.fullmatch(text):
                raise PathTemplateError(
                    f"Path parameter {token.name!r}={text!r} does not match "
                    f"{token.constraint.pattern!r}"
                )
            parts.append(token.prefix + quote(text, safe=""))
        return "".join(parts)

    return build


__all__ = ["PathBuilder", "compile_path", "parse"]
