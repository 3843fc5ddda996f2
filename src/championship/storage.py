"""Filesystem storage for exported databases.

Saves and loads export text (see ``championship.serializer``) as UTF-8
JSON files under a flat directory::

    base_dir/
      exports/
        open-s55.json
        open-s55-compressed.json
"""

import re
from pathlib import Path

from championship.models import ChampionshipDatabase
from championship.serializer import export_database, import_database

_VALID_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


class ExportStorage:
    """Save/load/exists layer for database exports.

    Usage::

        storage = ExportStorage("data")
        path = storage.save(db, "open-s55", compressed=True)
        db = storage.load("open-s55")
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    @property
    def exports_dir(self) -> Path:
        return self.base_dir / "exports"

    def save(
        self,
        db: ChampionshipDatabase,
        name: str,
        compressed: bool = False,
    ) -> Path:
        """Export ``db`` and write it to ``exports/{name}.json``.

        Returns:
            Path to the written file.

        Raises:
            ValueError: If ``name`` contains characters outside
                ``[A-Za-z0-9_.-]``.
        """
        file_path = self._build_path(name)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(export_database(db, compressed=compressed), encoding="utf-8")
        return file_path

    def load(self, name: str) -> ChampionshipDatabase:
        """Read and import ``exports/{name}.json``.

        Raises:
            FileNotFoundError: If no export with that name exists.
            UnsupportedFormatError: If the file is not a known export format.
        """
        file_path = self._build_path(name)
        if not file_path.exists():
            raise FileNotFoundError(f"No saved export named {name!r}: {file_path}")
        return import_database(file_path.read_text(encoding="utf-8"))

    def exists(self, name: str) -> bool:
        return self._build_path(name).exists()

    def list_exports(self) -> list[str]:
        """Names of all saved exports, sorted. Empty if none were saved."""
        if not self.exports_dir.exists():
            return []
        return sorted(path.stem for path in self.exports_dir.glob("*.json"))

    def _build_path(self, name: str) -> Path:
        if not _VALID_NAME.match(name):
            raise ValueError(
                f"Invalid export name {name!r}; use letters, digits, '_', '.' or '-'"
            )
        return self.exports_dir / f"{name}.json"
