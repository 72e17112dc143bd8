"""Shared pytest fixtures for treedrop tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from treedrop.config import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop the cached Settings so env changes in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
