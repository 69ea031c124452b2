from collections.abc import Callable
from pathlib import Path

import pytest

from aurwatch.config import get_settings

_ENV_KEYS = (
    "APP_ENV",
    "LOG_LEVEL",
    "REPO_DIR",
    "TMP_DIR",
    "REFRESH_INTERVAL_SECONDS",
    "UPDATE_CONCURRENCY",
    "JOB_POLL_INTERVAL_SECONDS",
    "AUR_BASE_URL",
    "AUR_TIMEOUT_SECONDS",
    "GIT_URL",
    "GIT_USER",
    "GIT_TOKEN",
    "GIT_AUTHOR_NAME",
    "GIT_AUTHOR_EMAIL",
    "RBUILD_URL",
    "RBUILD_USER",
    "RBUILD_TOKEN",
    "DMANAGER_URL",
    "DMANAGER_USER",
    "DMANAGER_TOKEN",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
)

TreeLayout = dict[str, str | bytes | None]


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the settings under test.
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def write_tree(root: Path, layout: TreeLayout) -> Path:
    """Create files below ``root``; a None value creates an empty directory."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in layout.items():
        path = root / rel
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[str, TreeLayout], Path]:
    def _make(name: str, layout: TreeLayout) -> Path:
        return write_tree(tmp_path / name, layout)

    return _make
