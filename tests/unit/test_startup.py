"""Unit tests for environment initialization."""

import os

import pytest

from jobsheet_extraction import startup


@pytest.fixture(autouse=True)
def _reset_startup():
    startup.reset_for_testing()
    yield
    startup.reset_for_testing()


class TestEnsureInitialized:

    def test_loads_env_file_once(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("JOBSHEET_TEST_VALUE=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("JOBSHEET_TEST_VALUE", raising=False)

        loaded = startup.ensure_initialized()

        assert loaded == tmp_path / ".env"
        assert os.environ["JOBSHEET_TEST_VALUE"] == "from-dotenv"
        assert startup.ensure_initialized() == loaded
        monkeypatch.delenv("JOBSHEET_TEST_VALUE")

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("JOBSHEET_TEST_VALUE=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JOBSHEET_TEST_VALUE", "from-shell")

        startup.ensure_initialized()

        assert os.environ["JOBSHEET_TEST_VALUE"] == "from-shell"

    def test_no_env_file(self, tmp_path, monkeypatch):
        (tmp_path / "pyproject.toml").write_text("")
        monkeypatch.chdir(tmp_path)
        assert startup.ensure_initialized() is None
