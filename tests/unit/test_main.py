import asyncio

import httpx
import pytest

from app import main as courier
from app.utils.config import Settings
from domains.screenshot_upload.errors import SendFailure, is_transient_network_error


def test_run_once_delivers_pending_screenshots(tmp_path, screenshot_dir, make_screenshot, messenger):
    make_screenshot("Mining(99).png", 1000)
    make_screenshot("Pet_12345.png", 2000)
    settings = Settings(
        screenshot_dir=screenshot_dir,
        state_file=tmp_path / "state.json",
        run_once=True,
        shutdown_grace=0,
    )

    delivered = asyncio.run(courier.run(settings, messenger))

    assert delivered == 2
    assert sorted(messenger.created) == ["barrows", "level-ups", "misc", "pets", "quests"]
    assert [dest for dest, _, _ in messenger.sent] == ["level-ups", "pets"]
    assert messenger.closed

    # A second run after "restart" posts nothing new
    assert asyncio.run(courier.run(settings, messenger)) == 0
    assert len(messenger.sent) == 2


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("[Errno -3] Temporary failure in name resolution"),
        httpx.ReadTimeout("timed out"),
        OSError("getaddrinfo ENOTFOUND discord.com"),
        RuntimeError("connect ETIMEDOUT 162.159.128.233:443"),
        RuntimeError("Something took too long to do"),
    ],
)
def test_main_exits_with_distinct_status_on_network_failure(monkeypatch, tmp_path, error):
    async def failing_run(settings, messenger=None):
        raise error

    monkeypatch.setattr(courier, "run", failing_run)

    assert courier.main(["--once", "--screenshot-dir", str(tmp_path)]) == courier.TRANSIENT_NETWORK_EXIT_CODE


def test_main_reraises_other_failures(monkeypatch, tmp_path):
    async def failing_run(settings, messenger=None):
        raise ValueError("bad config")

    monkeypatch.setattr(courier, "run", failing_run)

    with pytest.raises(ValueError):
        courier.main(["--once", "--screenshot-dir", str(tmp_path)])


def test_main_applies_cli_overrides(monkeypatch, tmp_path):
    seen = {}

    async def recording_run(settings, messenger=None):
        seen["settings"] = settings
        return 0

    monkeypatch.setattr(courier, "run", recording_run)

    assert courier.main(["--once", "--screenshot-dir", str(tmp_path), "--state-file", str(tmp_path / "s.json")]) == 0
    assert seen["settings"].run_once is True
    assert seen["settings"].get_screenshot_dir() == tmp_path
    assert seen["settings"].state_file == tmp_path / "s.json"


def test_wrapped_transient_error_is_detected():
    try:
        try:
            raise httpx.ConnectTimeout("handshake")
        except httpx.ConnectTimeout as e:
            raise RuntimeError("channel setup failed") from e
    except RuntimeError as wrapped:
        assert is_transient_network_error(wrapped)


def test_send_failure_is_not_transient():
    assert not is_transient_network_error(SendFailure("403 Missing Permissions"))


def test_main_refuses_to_start_without_screenshot_dir(monkeypatch):
    calls = []

    async def recording_run(settings, messenger=None):
        calls.append(settings)
        return 0

    monkeypatch.setattr(courier, "run", recording_run)
    monkeypatch.setattr(
        courier,
        "get_settings",
        lambda: Settings(_env_file=None, runelite_username="", screenshot_dir=None),
    )

    assert courier.main(["--once"]) == 1
    assert calls == []
