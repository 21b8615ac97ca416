"""Tests for Logfire initialization."""

import logging

from docrepo.config import Settings
from docrepo.observability import initialize_logfire


def test_missing_token_disables_logfire(caplog) -> None:
    root_handlers = list(logging.getLogger().handlers)

    with caplog.at_level(logging.WARNING, logger="docrepo.observability"):
        initialize_logfire(Settings(logfire_token=""))

    assert "observability disabled" in caplog.text
    assert logging.getLogger().handlers == root_handlers
