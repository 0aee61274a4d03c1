"""Unit tests for the command line entry point."""

from pathlib import Path

import pytest

from lifetrack.__main__ import main, parse_args


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.config is None
        assert args.profile is None
        assert not args.dry_run
        assert not args.once

    def test_rejects_unknown_profile(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--profile", "staging"])


class TestMain:
    """Tests for main()."""

    def test_dry_run_with_config_file(self, tmp_path: Path) -> None:
        """Test a dry run loads the config and exits cleanly."""
        path = tmp_path / "lifetrack.yaml"
        path.write_text("lifetrack:\n  goals:\n    targets:\n      work: 30\n")

        assert main(["--config", str(path), "--dry-run"]) == 0

    def test_missing_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--config", str(tmp_path / "missing.yaml"), "--dry-run"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_goal_category(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an unknown goal category is reported instead of raised."""
        path = tmp_path / "lifetrack.yaml"
        path.write_text("lifetrack:\n  goals:\n    targets:\n      gaming: 30\n")

        assert main(["--config", str(path), "--dry-run"]) == 1
        assert "Error loading config" in capsys.readouterr().err
