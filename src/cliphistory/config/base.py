# region Docstring
"""
cliphistory.config.base

Environment detection and application root resolution.

Overview:
- Provides a utility class for detecting the current application environment
    (prod, dev or test) and resolving the directory that holds the history
    database, preferences and logs.
- Exposes module-level constants for the resolved values.

Contents:
- Classes:
    - AppEnv:
        Class methods to determine the current environment and the application
        root directory.

- Module-level Constants:
    - APP_ROOT (Path): The resolved data directory of the application.
    - APP_ENV (Literal["prod", "dev", "test"]): The detected environment.

Environment Detection Logic:
- CLIPHISTORY_ENV selects the environment explicitly; anything else falls
    back to "prod".
- CLIPHISTORY_HOME overrides the data directory; the default is
    ~/.cliphistory.

Design Notes:
- Detection is performed at import time so every settings class resolves the
    same YAML files and default paths.
"""
# endregion
# region Imports
import os
from pathlib import Path
from typing import Literal

# endregion
# region AppEnv Class


class AppEnv:
    """
    Application environment detection utility.

    Attributes:
        PROD (Literal["prod"]): Constant representing the production environment.
        DEV (Literal["dev"]): Constant representing the development environment.
        TEST (Literal["test"]): Constant representing the test environment.
    """

    PROD: Literal["prod"] = "prod"
    DEV: Literal["dev"] = "dev"
    TEST: Literal["test"] = "test"

    @classmethod
    def environment(cls) -> Literal["prod", "dev", "test"]:
        """Determine the current application environment."""
        value = os.getenv("CLIPHISTORY_ENV", "").strip().lower()
        if value in {cls.PROD, cls.DEV, cls.TEST}:
            return value  # type: ignore[return-value]
        return cls.PROD

    @classmethod
    def app_root(cls) -> Path:
        """Get the application data directory."""
        override = os.getenv("CLIPHISTORY_HOME")
        if override:
            return Path(override).expanduser().resolve()
        return (Path.home() / ".cliphistory").resolve()


# endregion
# region Module-level Constants

APP_ROOT: Path = AppEnv.app_root()
"""[Path] Data directory of the application."""
APP_ENV: Literal["prod", "dev", "test"] = AppEnv.environment()
"""[Literal] Environment type."""
# endregion


__all__ = [
    "APP_ENV",
    "APP_ROOT",
    "AppEnv",
]
