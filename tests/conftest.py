"""Top-level fixtures shared by unit and integration tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test (e.g. the CLI) installed."""
    yield
    structlog.reset_defaults()
