"""Tests for the typer command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import (
    CREDENTIALS,
    FakeResponse,
    FakeSession,
    auth_ok,
    detail_ok,
    make_illust,
    search_ok,
    vendor_error,
)
from pixiv_illust.entrypoints.cli import app
from pixiv_illust.infrastructure.providers.pixiv.client import PixivApiClient
from pixiv_illust.shared.constants import ENV_KEYS

runner = CliRunner()
PIXIV_URL = "https://www.pixiv.net/member_illust.php?mode=medium&illust_id=12345"
LARGE_URL = "https://i.pximg.net/img-master/img/12345_p0_master1200.jpg"


@pytest.fixture
def session(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeSession:
    """Configure credentials via the environment and route the CLI client to a fake session."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(ENV_KEYS.PIXIV_USERNAME, CREDENTIALS["username"])
    monkeypatch.setenv(ENV_KEYS.PIXIV_PASSWORD, CREDENTIALS["password"])
    monkeypatch.setenv(ENV_KEYS.PIXIV_CLIENT_ID, CREDENTIALS["client_id"])
    monkeypatch.setenv(ENV_KEYS.PIXIV_CLIENT_SECRET, CREDENTIALS["client_secret"])

    fake = FakeSession()
    original = PixivApiClient.from_settings.__func__

    def _from_settings(cls, settings, session=None):
        return original(cls, settings, session=fake)

    monkeypatch.setattr(PixivApiClient, "from_settings", classmethod(_from_settings))
    return fake


class TestDetailCommand:
    def test_prints_illust_summary(self, session: FakeSession) -> None:
        session.queue(auth_ok(), detail_ok(12345, large=LARGE_URL))

        result = runner.invoke(app, ["detail", "12345"])

        assert result.exit_code == 0, result.output
        assert "Illust 12345" in result.output
        assert "landscape" in result.output

    def test_session_is_closed_after_command(self, session: FakeSession) -> None:
        session.queue(auth_ok(), detail_ok(12345))

        result = runner.invoke(app, ["detail", "12345"])

        assert result.exit_code == 0, result.output
        assert session.closed


class TestSearchCommands:
    def test_search_lists_results(self, session: FakeSession) -> None:
        session.queue(auth_ok(), search_ok(make_illust(1), make_illust(2)))

        result = runner.invoke(app, ["search", "cat", "--limit", "1"])

        assert result.exit_code == 0, result.output
        assert "Illust 1" in result.output
        assert "Illust 2" not in result.output

    def test_image_url_prints_first_large_url(self, session: FakeSession) -> None:
        session.queue(auth_ok(), search_ok(make_illust(1, large=LARGE_URL)))

        result = runner.invoke(app, ["image-url", "cat"])

        assert result.exit_code == 0, result.output
        assert LARGE_URL in result.output


class TestDownloadCommand:
    def test_writes_image_to_output(self, session: FakeSession, tmp_path: Path) -> None:
        session.queue(
            auth_ok(),
            detail_ok(12345, large=LARGE_URL),
            FakeResponse(content=b"jpeg-bytes", content_type="image/jpeg"),
        )
        output = tmp_path / "out" / "image.jpg"

        result = runner.invoke(app, ["download", PIXIV_URL, "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"jpeg-bytes"

    def test_default_output_uses_illust_id(
        self, session: FakeSession, tmp_path: Path
    ) -> None:
        session.queue(
            auth_ok(),
            detail_ok(12345, large=LARGE_URL),
            FakeResponse(content=b"jpeg-bytes", content_type="image/jpeg"),
        )

        result = runner.invoke(app, ["download", PIXIV_URL])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "12345.jpg").read_bytes() == b"jpeg-bytes"

    def test_default_output_matches_client_id_extraction(
        self, session: FakeSession, tmp_path: Path
    ) -> None:
        session.queue(
            auth_ok(),
            detail_ok(5, large=LARGE_URL),
            FakeResponse(content=b"jpeg-bytes", content_type="image/jpeg"),
        )
        url = "https://www.pixiv.net/member_illust.php?foo_illust_id=x&illust_id=5#frag"

        result = runner.invoke(app, ["download", url])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "5.jpg").read_bytes() == b"jpeg-bytes"
        assert session.calls[1].params["illust_id"] == "5"

    def test_deleted_work_is_not_a_failure(
        self, session: FakeSession, tmp_path: Path
    ) -> None:
        session.queue(
            auth_ok(),
            vendor_error("", user_message="該当作品は削除されたか、存在しない作品IDです。"),
        )

        result = runner.invoke(app, ["download", PIXIV_URL])

        assert result.exit_code == 0, result.output
        assert not (tmp_path / "12345.jpg").exists()

    def test_invalid_url_exits_with_error(self, session: FakeSession) -> None:
        result = runner.invoke(app, ["download", "https://example.com/image.png"])

        assert result.exit_code == 1
        assert session.calls == []


class TestConfiguration:
    def test_missing_credentials_exit_with_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        for key in (
            ENV_KEYS.PIXIV_USERNAME,
            ENV_KEYS.PIXIV_PASSWORD,
            ENV_KEYS.PIXIV_CLIENT_ID,
            ENV_KEYS.PIXIV_CLIENT_SECRET,
        ):
            monkeypatch.delenv(key, raising=False)

        result = runner.invoke(app, ["detail", "1"])

        assert result.exit_code == 1
