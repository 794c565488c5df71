"""User directory factory (USER_DIRECTORY_ADAPTER, default ``fake``)."""

import os

from shipping.directory.port import UserDirectory

_current_directory: UserDirectory | None = None


def get_directory() -> UserDirectory:
    """Return the configured user directory (singleton)."""
    global _current_directory
    if _current_directory is None:
        adapter = os.environ.get("USER_DIRECTORY_ADAPTER", "fake")
        if adapter == "fake":
            from shipping.directory.fake_adapter import FakeUserDirectory

            _current_directory = FakeUserDirectory()
        else:
            raise ValueError(f"Unknown user directory adapter: {adapter}")
    return _current_directory


def set_directory(directory: UserDirectory) -> None:
    """Override the active user directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    global _current_directory
    _current_directory = None
