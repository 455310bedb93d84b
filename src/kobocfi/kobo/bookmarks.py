"""Read highlight bookmarks from a Kobo reader SQLite database."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import sqlite3


@dataclass(slots=True)
class BookmarkDatabaseError(Exception):
    """Kobo database could not be opened or queried."""

    db_path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (db={self.db_path})"


@dataclass(frozen=True, slots=True)
class BookmarkRow:
    bookmark_id: str
    volume_id: str
    text: str | None
    annotation: str | None
    date_created: str | None = None


class BookmarkRepository:
    """Read-only access to the ``Bookmark`` table of ``KoboReader.sqlite``."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path).resolve()
        if not self._db_path.is_file():
            raise BookmarkDatabaseError(self._db_path, "Error opening database: file does not exist")
        try:
            self._connection = sqlite3.connect(f"{self._db_path.as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise BookmarkDatabaseError(self._db_path, f"Error opening database: {exc}") from exc
        self._connection.row_factory = sqlite3.Row

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "BookmarkRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch_bookmarks(self) -> list[BookmarkRow]:
        """Return every bookmark ordered by ``BookmarkID``."""

        try:
            rows = self._connection.execute("SELECT * FROM Bookmark ORDER BY BookmarkID").fetchall()
        except sqlite3.Error as exc:
            raise BookmarkDatabaseError(self._db_path, f"Error querying Bookmark table: {exc}") from exc

        bookmarks: list[BookmarkRow] = []
        for row in rows:
            columns = row.keys()
            bookmarks.append(
                BookmarkRow(
                    bookmark_id=str(row["BookmarkID"]),
                    volume_id=str(row["VolumeID"]),
                    text=row["Text"],
                    annotation=row["Annotation"],
                    date_created=row["DateCreated"] if "DateCreated" in columns else None,
                )
            )
        return bookmarks
