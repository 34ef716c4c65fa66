"""Shared test configuration."""

import pytest

from flashcard_manager import cli


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    """Configure structlog as `main` does by default, so debug logs stay off stdout."""
    cli.configure_logging("critical")
