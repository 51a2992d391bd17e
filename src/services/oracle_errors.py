from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar


class OracleErrorKind(StrEnum):
    TRANSPORT = "transport"
    DECODE = "decode"
    DATA_NOT_FOUND = "data_not_found"
    INDEX_OUT_OF_RANGE = "index_out_of_range"


class OracleSourceError(Exception):
    """Base class for every classified failure of ``OracleSource.fetch``."""

    kind: ClassVar[OracleErrorKind]

    def __init__(self, message: str, *, url: str | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.payload = payload


class TransportError(OracleSourceError):
    kind = OracleErrorKind.TRANSPORT


class DecodeError(OracleSourceError):
    kind = OracleErrorKind.DECODE


class DataNotFoundError(OracleSourceError):
    kind = OracleErrorKind.DATA_NOT_FOUND


class IndexOutOfRangeError(OracleSourceError):
    kind = OracleErrorKind.INDEX_OUT_OF_RANGE


__all__ = [
    "DataNotFoundError",
    "DecodeError",
    "IndexOutOfRangeError",
    "OracleErrorKind",
    "OracleSourceError",
    "TransportError",
]
