import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tests.test_helpers import FakeBotServer  # noqa: E402


@pytest.fixture
def server() -> FakeBotServer:
    return FakeBotServer()
