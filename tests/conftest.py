import os
import pytest
from typer.testing import CliRunner
from pathlib import Path

from spillcache.domain.errors import SpillStoreError
from spillcache.infrastructure.cache.file_backed_cache import FileBackedCache
from spillcache.infrastructure.cli.display import ConsoleDisplay
from spillcache.infrastructure.config import settings


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def scratch_parent(tmp_path: Path) -> Path:
    """Directory every test cache creates its scratch directory in."""
    parent = tmp_path / "scratch"
    parent.mkdir()
    return parent


@pytest.fixture
def make_cache(scratch_parent: Path):
    """Factory for caches rooted in the per-test scratch parent; clears them afterwards."""
    created = []

    def _make(memory_capacity: int = 3, on_promote=None) -> FileBackedCache:
        cache = FileBackedCache(memory_capacity, on_promote, scratch_parent=scratch_parent)
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        try:
            cache.clear()
        except SpillStoreError:
            pass # Tests that break files on purpose leave them for tmp_path cleanup


@pytest.fixture
def mock_console_display(mocker):
    """ Mocks the ConsoleDisplay to capture output easily.
        Patches the ConsoleDisplay where main.py builds it.
    """
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('spillcache.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Keeps user config files, .env files and SPILLCACHE_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, 'DEFAULT_CONFIG_FILE', tmp_path / "missing-config.yaml")
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()
