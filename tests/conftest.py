import pytest

from pagecursor.config import CursorSettings
from tests.records import Row


@pytest.fixture
def row() -> Row:
    return Row(ID=5, Name="foo")


@pytest.fixture
def settings() -> CursorSettings:
    return CursorSettings(legacy_decode_enabled=True, legacy_time_fallback=True)
