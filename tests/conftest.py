from __future__ import annotations

import copy
from collections.abc import Iterator

import pytest

from procpipe.config.settings import LOG_FILE_ENV, LOG_LEVEL_ENV, settings


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Prevent tests from persisting settings to disk."""
    original_data = copy.deepcopy(settings._data)

    def _noop_save() -> None:
        return None

    monkeypatch.setattr(settings, "_save", _noop_save)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    settings._data = {}
    try:
        yield
    finally:
        settings._data = original_data
