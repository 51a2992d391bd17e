from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Sequence

import requests
from jsonpath_ng.ext import parse
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.jsonpath import JSONPath
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import config
from domain.oracle_types import UINT256_MAX, FetchParameters, NumericResult, to_numeric_result

from .oracle_errors import DataNotFoundError, DecodeError, IndexOutOfRangeError, TransportError
from .oracle_sources import OracleSource

logger = logging.getLogger(__name__)

PLACEHOLDER = "{}"

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_UTF8_NAMES = frozenset({"utf-8", "utf8"})


class _FeedClient:
    """Blocking JSON GET client around one ``requests.Session``.

    A session is not documented as thread-safe, so a client should not be shared by
    sources that are fetched from several threads at once.
    """

    def __init__(
        self,
        timeout: float | None = None,
        session: requests.Session | None = None,
        retry_attempts: int | None = None,
    ) -> None:
        settings = config()
        self.timeout = settings.http_timeout if timeout is None else timeout
        self._session = session or requests.Session()

        attempts = settings.http_retry_attempts if retry_attempts is None else retry_attempts
        retries = Retry(
            total=attempts,
            backoff_factor=1,
            status_forcelist=[429],
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def get_json(self, url: str) -> Any:
        try:
            response = self._session.request("GET", url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status_code = getattr(exc.response, "status_code", None)
            raise TransportError(f"Feed request failed with HTTP status {status_code}", url=url) from exc
        except requests.RequestException as exc:
            raise TransportError("Feed request failed", url=url) from exc

        encoding = response.encoding or "utf-8"
        if encoding.lower().replace("_", "-") in _UTF8_NAMES:
            encoding = "utf-8-sig"
        try:
            body = response.content.decode(encoding)
        except (LookupError, UnicodeDecodeError) as exc:
            raise TransportError("Feed returned an undecodable body", url=url) from exc

        try:
            return json.loads(body)
        except ValueError as exc:
            raise DecodeError("Feed returned invalid JSON", url=url, payload=body) from exc


def compile_jsonpath(expression: str) -> JSONPath:
    try:
        return parse(expression)
    except JSONPathError as exc:
        msg = f"Invalid JSONPath expression {expression!r}: {exc}"
        raise ValueError(msg) from exc


def extract_value(document: Any, path: JSONPath) -> float:
    """Return the first node matched by ``path`` as a float.

    Strings must hold a base-10 number; JSON numbers are used as they are. Any other
    node type cannot represent a price.
    """
    try:
        matches = path.find(document)
    except (TypeError, KeyError, IndexError, AttributeError) as exc:
        raise DataNotFoundError(f"JSONPath {path} does not apply to the document shape", payload=document) from exc
    if not matches:
        raise DataNotFoundError(f"JSONPath {path} matched nothing", payload=document)

    node = matches[0].value
    if isinstance(node, str):
        literal = node.strip()
        if not _DECIMAL_LITERAL.fullmatch(literal):
            raise DecodeError(f"Matched string {node!r} is not a number", payload=node)
        return float(literal)
    if isinstance(node, bool) or not isinstance(node, (int, float)):
        raise DataNotFoundError(f"Matched node of type {type(node).__name__} is not numeric", payload=node)
    try:
        return float(node)
    except OverflowError as exc:
        raise DecodeError("Matched number is out of floating-point range", payload=node) from exc


def scale_value(value: float, decimal: int) -> NumericResult:
    """Multiply by ``10 ** decimal`` and truncate toward zero.

    The multiplication is done in binary floating point, so very large prices or
    exponents lose precision beyond what a double can represent.
    """
    try:
        scaled = value * 10.0**decimal
    except OverflowError as exc:
        raise DecodeError(f"Scaling by 10^{decimal} overflows", payload=value) from exc
    if not math.isfinite(scaled):
        raise DecodeError(f"Scaled value {value} x 10^{decimal} is not finite", payload=value)
    if scaled < 0:
        raise DecodeError(f"Negative value {value} cannot be represented", payload=value)

    truncated = math.trunc(scaled)
    if truncated > UINT256_MAX:
        raise DecodeError(f"Scaled value {value} x 10^{decimal} exceeds 256 bits", payload=value)
    return to_numeric_result(truncated)


class _JsonFeedSource(OracleSource):
    def __init__(
        self,
        *,
        name: str,
        url: str,
        jsonpath: str,
        decimal: int,
        client: _FeedClient | None = None,
    ) -> None:
        if not url:
            msg = "url must be provided"
            raise ValueError(msg)
        if decimal < 0:
            msg = "decimal must be >= 0"
            raise ValueError(msg)

        self.name = name
        self.url = url
        self.jsonpath = jsonpath
        self.decimal = decimal
        self.client = client or _FeedClient()
        self._path = compile_jsonpath(jsonpath)

    def _fetch_url(self, url: str) -> NumericResult:
        logger.debug("Fetching feed %s", self.name)
        document = self.client.get_json(url)
        try:
            value = extract_value(document, self._path)
            return scale_value(value, self.decimal)
        except (DataNotFoundError, DecodeError) as exc:
            exc.url = url
            raise


class CustomFeedSource(_JsonFeedSource):
    """Remote JSON feed behind a fixed URL. Fetch parameters are ignored."""

    def __init__(
        self,
        *,
        url: str,
        jsonpath: str,
        decimal: int,
        name: str = "custom",
        client: _FeedClient | None = None,
    ) -> None:
        super().__init__(name=name, url=url, jsonpath=jsonpath, decimal=decimal, client=client)

    def fetch(self, parameters: FetchParameters) -> NumericResult:
        return self._fetch_url(self.url)


class RemoteFeedSource(_JsonFeedSource):
    """Remote JSON feed whose URL is built from a template.

    Markers are filled left to right with the static ``params``, then the quote
    selected by ``parameters[0]``, then the base selected by ``parameters[1]``.
    """

    def __init__(
        self,
        *,
        name: str,
        url: str,
        params: Sequence[str],
        jsonpath: str,
        decimal: int,
        bases: Sequence[str],
        quotes: Sequence[str],
        client: _FeedClient | None = None,
    ) -> None:
        expected = len(params) + 2
        found = url.count(PLACEHOLDER)
        if found != expected:
            msg = f"url template for {name} must contain {expected} {PLACEHOLDER} markers, found {found}"
            raise ValueError(msg)

        super().__init__(name=name, url=url, jsonpath=jsonpath, decimal=decimal, client=client)
        self.params = tuple(params)
        self.bases = tuple(bases)
        self.quotes = tuple(quotes)

    def fetch(self, parameters: FetchParameters) -> NumericResult:
        return self._fetch_url(self.resolve_url(parameters))

    def resolve_url(self, parameters: FetchParameters) -> str:
        if len(parameters) < 2:
            msg = f"{self.name} needs quote and base indices, got {len(parameters)} parameters"
            raise IndexOutOfRangeError(msg)

        quote = self._select(self.quotes, parameters[0], "quote")
        base = self._select(self.bases, parameters[1], "base")
        values = [*self.params, quote, base]

        pieces = self.url.split(PLACEHOLDER)
        resolved = [pieces[0]]
        for value, piece in zip(values, pieces[1:]):
            resolved.append(value)
            resolved.append(piece)
        return "".join(resolved)

    def _select(self, symbols: tuple[str, ...], index: int, role: str) -> str:
        if not 0 <= index < len(symbols):
            msg = f"{self.name} {role} index {index} out of range for {len(symbols)} symbols"
            raise IndexOutOfRangeError(msg)
        return symbols[index]


__all__ = [
    "CustomFeedSource",
    "PLACEHOLDER",
    "RemoteFeedSource",
    "compile_jsonpath",
    "extract_value",
    "scale_value",
]
