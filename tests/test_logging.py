"""Tests for the loguru setup used by the CLI."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

from pixiv_illust.utils.logging import setup_logging


@pytest.fixture
def records() -> Iterator[list]:
    setup_logging("DEBUG")
    captured: list = []
    logger.add(captured.append, level="DEBUG", format="{message}")
    yield captured
    logger.remove()


class TestSetupLogging:
    def test_secret_context_values_are_redacted(self, records: list) -> None:
        logger.bind(password="hunter2", access_token="tok", path="/v1/illust/detail").info(
            "request"
        )

        extra = records[-1].record["extra"]
        assert extra["password"] == "***"
        assert extra["access_token"] == "***"
        assert extra["path"] == "/v1/illust/detail"

