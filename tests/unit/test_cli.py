"""Tests for the CLI entry point."""

import pytest
import structlog

from siren_nav.__main__ import main


@pytest.fixture(autouse=True)
def reset_logging():
    """main() configures structlog globally; undo it after each test."""
    yield
    structlog.reset_defaults()


class TestMain:
    """Tests for main()."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("siren-nav ")

    def test_missing_url_exits_nonzero(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    def test_relative_url_exits_nonzero(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["/relative", "--follow", "x"])

        assert exc_info.value.code == 1
