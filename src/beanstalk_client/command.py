"""Command and response-parser shapes consumed by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable

from .errors import UnexpectedResponseError
from .protocol import ENCODING, ResponseLine


@runtime_checkable
class ResponseParser(Protocol):
    def parse_response(self, line: str, data: bytes | None) -> Any: ...


@runtime_checkable
class Command(Protocol):
    @property
    def command_line(self) -> str: ...

    @property
    def has_data(self) -> bool: ...

    @property
    def data(self) -> bytes | str | None: ...

    @property
    def response_parser(self) -> ResponseParser: ...


@dataclass(frozen=True)
class Response:
    status: str
    args: list[str] = field(default_factory=list)
    data: bytes | None = None

    def text(self) -> str | None:
        if self.data is None:
            return None
        return self.data.decode(ENCODING, errors="replace")


class StatusResponseParser:
    """Accepts a fixed set of status words and wraps them in a Response."""

    def __init__(self, expected: Iterable[str]) -> None:
        self.expected = frozenset(expected)

    def parse_response(self, line: str, data: bytes | None) -> Response:
        parsed = ResponseLine.parse(line)
        if parsed.status not in self.expected:
            raise UnexpectedResponseError(line, context={"expected": sorted(self.expected)})
        return Response(status=parsed.status, args=parsed.args, data=data)


@dataclass(frozen=True)
class RawCommand:
    """A command given directly as its command line, with an optional payload."""

    command_line: str
    response_parser: ResponseParser
    data: bytes | str | None = None

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def __str__(self) -> str:
        return self.command_line


__all__ = ["Command", "RawCommand", "Response", "ResponseParser", "StatusResponseParser"]
