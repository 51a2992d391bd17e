from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .feed_source import PLACEHOLDER, RemoteFeedSource, _FeedClient, compile_jsonpath

logger = logging.getLogger(__name__)


class SourceConfigError(ValueError):
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class SourceDescriptor(BaseModel):
    """Declarative definition of one remote price feed.

    ``url`` holds positional ``{}`` markers filled with ``params`` first, then the
    selected quote, then the selected base.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    url: str
    params: tuple[str, ...]
    jsonpath: str
    decimal: int = Field(ge=0)
    bases: tuple[str, ...]
    quotes: tuple[str, ...]

    @field_validator("jsonpath")
    @classmethod
    def _validate_jsonpath(cls, value: str) -> str:
        compile_jsonpath(value)
        return value

    @model_validator(mode="after")
    def _validate_url_markers(self) -> SourceDescriptor:
        expected = len(self.params) + 2
        found = self.url.count(PLACEHOLDER)
        if found != expected:
            raise ValueError(f"url must contain {expected} {PLACEHOLDER} markers, found {found}")
        return self


class SourceList(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    sources: tuple[SourceDescriptor, ...]

    @classmethod
    def from_toml(cls, text: str, *, path: Path | None = None) -> SourceList:
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise SourceConfigError(f"Source list is not valid TOML: {exc}", path=path) from exc
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise SourceConfigError(f"Source list failed validation: {exc}", path=path) from exc

    def get(self, name: str) -> SourceDescriptor | None:
        for descriptor in self.sources:
            if descriptor.name == name:
                return descriptor
        return None

    def names(self) -> list[str]:
        return [descriptor.name for descriptor in self.sources]


def load_source_list(path: Path) -> SourceList:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceConfigError(f"Cannot read source list {path}: {exc}", path=path) from exc

    source_list = SourceList.from_toml(text, path=path)
    logger.info("Loaded %d feed sources from %s", len(source_list.sources), path)
    return source_list


def build_feed_source(descriptor: SourceDescriptor, *, client: _FeedClient | None = None) -> RemoteFeedSource:
    return RemoteFeedSource(
        name=descriptor.name,
        url=descriptor.url,
        params=descriptor.params,
        jsonpath=descriptor.jsonpath,
        decimal=descriptor.decimal,
        bases=descriptor.bases,
        quotes=descriptor.quotes,
        client=client,
    )


def build_feed_sources(source_list: SourceList, *, client: _FeedClient | None = None) -> list[RemoteFeedSource]:
    # Without an explicit client every source gets its own session.
    return [build_feed_source(descriptor, client=client) for descriptor in source_list.sources]


__all__ = [
    "SourceConfigError",
    "SourceDescriptor",
    "SourceList",
    "build_feed_source",
    "build_feed_sources",
    "load_source_list",
]
