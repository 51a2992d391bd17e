from typing import Generator
from unittest.mock import Mock

import pytest

from config import config
from tests.helpers.feed_responses import json_response


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None, None, None]:
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def feed_session() -> Mock:
    session = Mock()
    session.request.return_value = json_response({"price": "1"})
    return session
