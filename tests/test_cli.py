"""Tests for the command-line entry point."""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from livesubclip.cli import EXIT_BAD_MANIFEST, EXIT_NO_WINDOW, main


def _run(argv: list[str]) -> int:
    with patch.object(sys, "argv", ["livesubclip", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            main()
    return exc_info.value.code


class TestResolveCommand:
    def test_prints_window(self, live_manifest_path: Path, capsys):
        code = _run(["resolve", str(live_manifest_path), "--interval", "4"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == {
            "start": "00:00:04",
            "end": "00:00:08",
            "duration": "PT4S",
        }

    def test_continues_from_last_end(self, live_manifest_path: Path, capsys):
        code = _run(["resolve", str(live_manifest_path), "-i", "4", "--last-end", "00:00:05"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["start"] == "00:00:05"

    def test_no_window(self, live_manifest_path: Path):
        assert _run(["resolve", str(live_manifest_path), "-i", "4", "-l", "00:00:08"]) == EXIT_NO_WINDOW

    def test_bad_manifest(self, tmp_path: Path):
        path = tmp_path / "broken.ismc"
        path.write_text("<SmoothStreamingMedia>")
        assert _run(["resolve", str(path)]) == EXIT_BAD_MANIFEST

    def test_bad_last_end(self, live_manifest_path: Path, capsys):
        assert _run(["resolve", str(live_manifest_path), "-l", "soon"]) == 1
        assert "Unrecognized time span" in capsys.readouterr().err


class TestServeCommand:
    @patch("livesubclip.web.create_app")
    def test_serves_from_config_file(self, mock_create_app, sample_config_path: Path):
        app = MagicMock()
        mock_create_app.return_value = app
        with patch.object(sys, "argv", ["livesubclip", "serve", "-c", str(sample_config_path), "--port", "9000"]):
            main()
        config = mock_create_app.call_args.args[0]
        assert config.service.account_name == "mediaaccount"
        app.run.assert_called_once_with(host="127.0.0.1", port=9000, debug=False)

    def test_missing_env_config(self, monkeypatch):
        for key in ("LIVESUBCLIP_SUBSCRIPTION_ID", "LIVESUBCLIP_RESOURCE_GROUP", "LIVESUBCLIP_ACCOUNT_NAME"):
            monkeypatch.delenv(key, raising=False)
        assert _run(["serve"]) == 1


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert _run([]) == 0
        assert "livesubclip" in capsys.readouterr().out
