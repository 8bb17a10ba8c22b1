"""Persisted answers: per-project configuration and global defaults.

The project store lives at ``<project>/.libgen.json`` and holds every
setting plus ``usedGeneratorVersion``.  The global defaults file lives
outside any project and only holds the settings flagged global.  Both are
read at start-up and written once, after all prompting has finished.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as ModelValidationError

from .config import PROJECT_CONFIG_NAME
from .errors import FilesystemError
from .settings import GLOBAL_SETTINGS, Settings, persisted_name
from .utils import load_json, print_warning, save_json

VERSION_KEY = "usedGeneratorVersion"


class ProjectStore:
    """Key/value answers scoped to one project directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def path(self) -> Path:
        return self.root / PROJECT_CONFIG_NAME

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> tuple[Settings, str | None]:
        """Read the stored settings and the version that wrote them.

        Returns empty settings and ``None`` when the file does not exist.

        Raises:
            FilesystemError: If the file exists but cannot be read or parsed.
        """
        if not self.exists():
            return Settings(), None
        try:
            data = load_json(self.path)
            settings = Settings.from_stored(data)
        except (OSError, ValueError, ModelValidationError) as exc:
            raise FilesystemError(self.path, f"cannot read project configuration ({exc})") from exc
        version = data.get(VERSION_KEY)
        return settings, str(version) if version is not None else None

    async def save(self, settings: Settings, generator_version: str) -> Path:
        """Persist *settings* and the generator version.

        Raises:
            FilesystemError: If the file cannot be written.
        """
        payload: dict[str, Any] = settings.to_stored()
        payload[VERSION_KEY] = generator_version
        try:
            await save_json(payload, self.path)
        except OSError as exc:
            raise FilesystemError(self.path, exc) from exc
        return self.path


class GlobalDefaults:
    """Answers reused across independently generated projects.

    Only settings in ``GLOBAL_SETTINGS`` are read or written.  A corrupt
    file is ignored: it only ever supplies defaults.
    """

    def __init__(self, path: str | Path, values: Mapping[str, Any] | None = None) -> None:
        self.path = Path(path)
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def load(cls, path: str | Path) -> "GlobalDefaults":
        path = Path(path)
        if not path.is_file():
            return cls(path)
        try:
            data = load_json(path)
        except (OSError, ValueError) as exc:
            print_warning(f"Ignoring unreadable global defaults {path}: {exc}")
            return cls(path)
        values = {
            name: data[persisted_name(name)]
            for name in GLOBAL_SETTINGS
            if data.get(persisted_name(name)) is not None
        }
        return cls(path, values)

    def get(self, name: str) -> Any:
        """Return the global default for *name*, or ``None``."""
        if name not in GLOBAL_SETTINGS:
            return None
        return self._values.get(name)

    def update(self, settings: Settings) -> None:
        """Take over every answered global setting from *settings*."""
        for name in GLOBAL_SETTINGS:
            value = getattr(settings, name)
            if value is not None:
                self._values[name] = value

    def to_stored(self) -> dict[str, Any]:
        return {persisted_name(name): self._values[name] for name in sorted(self._values)}

    async def save(self) -> Path:
        """Write the defaults file, keeping keys unrelated to this tool.

        Raises:
            FilesystemError: If the file cannot be written.
        """
        payload: dict[str, Any] = {}
        if self.path.is_file():
            try:
                payload = load_json(self.path)
            except (OSError, ValueError):
                payload = {}
        payload.update(self.to_stored())
        try:
            await save_json(payload, self.path)
        except OSError as exc:
            raise FilesystemError(self.path, exc) from exc
        return self.path
