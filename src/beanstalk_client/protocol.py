"""Wire constants and framing helpers for the beanstalk text protocol."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .errors import ClientError, ServerErrorKind

CRLF = b"\r\n"
CRLF_LENGTH = len(CRLF)
ENCODING = "utf-8"

DEFAULT_PORT = 11300
DEFAULT_TIMEOUT = 2.0

# Status words
INSERTED = "INSERTED"
BURIED = "BURIED"
EXPECTED_CRLF = "EXPECTED_CRLF"
JOB_TOO_BIG = "JOB_TOO_BIG"
USING = "USING"
DEADLINE_SOON = "DEADLINE_SOON"
RESERVED = "RESERVED"
TIMED_OUT = "TIMED_OUT"
DELETED = "DELETED"
NOT_FOUND = "NOT_FOUND"
WATCHING = "WATCHING"
FOUND = "FOUND"
KICKED = "KICKED"
OK = "OK"

OUT_OF_MEMORY = ServerErrorKind.OUT_OF_MEMORY.value
INTERNAL_ERROR = ServerErrorKind.INTERNAL_ERROR.value
DRAINING = ServerErrorKind.DRAINING.value
BAD_FORMAT = ServerErrorKind.BAD_FORMAT.value
UNKNOWN_COMMAND = ServerErrorKind.UNKNOWN_COMMAND.value

ERROR_RESPONSES: Mapping[str, ServerErrorKind] = MappingProxyType({kind.value: kind for kind in ServerErrorKind})

DATA_RESPONSES: frozenset[str] = frozenset({RESERVED, FOUND, OK})


@dataclass(frozen=True)
class ResponseLine:
    raw: str
    status: str
    remainder: str

    @classmethod
    def parse(cls, line: str) -> "ResponseLine":
        parts = line.split(None, 1)
        if not parts:
            return cls(raw=line, status="", remainder="")
        status = parts[0]
        remainder = parts[1] if len(parts) > 1 else ""
        return cls(raw=line, status=status, remainder=remainder)

    @property
    def args(self) -> list[str]:
        return self.remainder.split()

    @property
    def error_kind(self) -> ServerErrorKind | None:
        return ERROR_RESPONSES.get(self.status)

    @property
    def has_data(self) -> bool:
        return self.status in DATA_RESPONSES

    def data_length(self) -> int:
        """Byte count announced by the last token of a data-bearing line."""
        tokens = self.raw.split()
        last = tokens[-1] if len(tokens) > 1 else ""
        if not (last.isascii() and last.isdigit()):
            raise ClientError(
                f"Expected a data length at the end of '{self.raw}'",
                context={"status_line": self.raw},
            )
        return int(last)


def build_frame(command_line: str, data: bytes | str | None = None) -> bytes:
    frame = command_line.encode(ENCODING) + CRLF
    if data is not None:
        payload = data.encode(ENCODING) if isinstance(data, str) else bytes(data)
        frame += payload + CRLF
    return frame


__all__ = [
    "BAD_FORMAT",
    "BURIED",
    "CRLF",
    "CRLF_LENGTH",
    "DATA_RESPONSES",
    "DEADLINE_SOON",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "DELETED",
    "DRAINING",
    "ENCODING",
    "ERROR_RESPONSES",
    "EXPECTED_CRLF",
    "FOUND",
    "INSERTED",
    "INTERNAL_ERROR",
    "JOB_TOO_BIG",
    "KICKED",
    "NOT_FOUND",
    "OK",
    "OUT_OF_MEMORY",
    "RESERVED",
    "TIMED_OUT",
    "UNKNOWN_COMMAND",
    "USING",
    "WATCHING",
    "ResponseLine",
    "build_frame",
]
