from __future__ import annotations

import logging
import secrets
import time
from typing import Callable, Protocol

from domain.oracle_types import FetchParameters, NumericResult, to_numeric_result

logger = logging.getLogger(__name__)

# Value returned by the reference RNG source. It is a placeholder, not entropy.
PLACEHOLDER_RANDOM_VALUE = 1


class OracleSource(Protocol):
    name: str

    def fetch(self, parameters: FetchParameters) -> NumericResult: ...


def secure_random_value() -> int:
    return secrets.randbits(256)


def _placeholder_random_value() -> int:
    return PLACEHOLDER_RANDOM_VALUE


class ClockSource(OracleSource):
    """Current wall-clock time as whole seconds since the Unix epoch, unscaled."""

    def __init__(self, *, name: str = "time", clock: Callable[[], float] = time.time) -> None:
        self.name = name
        self._clock = clock

    def fetch(self, parameters: FetchParameters) -> NumericResult:
        return to_numeric_result(int(self._clock()))


class RandomSource(OracleSource):
    """Pseudo-random unsigned value drawn from an injected generator.

    Without a generator the source returns ``PLACEHOLDER_RANDOM_VALUE``, matching the
    reference oracle. Pass ``generator=secure_random_value`` for unpredictable output.
    """

    def __init__(self, *, name: str = "rng", generator: Callable[[], int] | None = None) -> None:
        self.name = name
        if generator is None:
            logger.warning(
                "Random source %s uses the placeholder generator and always returns %d",
                name,
                PLACEHOLDER_RANDOM_VALUE,
            )
            generator = _placeholder_random_value
        self._generator = generator

    def fetch(self, parameters: FetchParameters) -> NumericResult:
        return to_numeric_result(self._generator())


__all__ = [
    "ClockSource",
    "OracleSource",
    "PLACEHOLDER_RANDOM_VALUE",
    "RandomSource",
    "secure_random_value",
]
