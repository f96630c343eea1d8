"""
SQLite-backed record store for catalog entries.

One row per website; the URL is unique. Color palettes are stored as a JSON
string column and decoded on read.
"""

import json
import sqlite3
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .capture.errors import DuplicateWebsiteError

SCHEMA = """
CREATE TABLE IF NOT EXISTS websites (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    description TEXT,
    category TEXT,
    tags TEXT,
    screenshotPath TEXT NOT NULL,
    colorPalette TEXT,
    createdAt TEXT NOT NULL
)
"""


@dataclass
class Website:
    """A catalog entry."""
    id: int
    title: str
    url: str
    screenshot_path: str
    created_at: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    color_palette: list[str] = field(default_factory=list)

    @property
    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [t.strip() for t in self.tags.split(',') if t.strip()]

    def to_dict(self) -> dict:
        """Serialize with the camelCase field names the web client expects."""
        data = asdict(self)
        return {
            'id': data['id'],
            'title': data['title'],
            'url': data['url'],
            'description': data['description'],
            'category': data['category'],
            'tags': data['tags'],
            'screenshotPath': data['screenshot_path'],
            'colorPalette': data['color_palette'],
            'createdAt': data['created_at'],
        }


def _decode_palette(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return [c for c in value if isinstance(c, str)] if isinstance(value, list) else []


def _row_to_website(row: sqlite3.Row) -> Website:
    return Website(
        id=row['id'],
        title=row['title'],
        url=row['url'],
        description=row['description'],
        category=row['category'],
        tags=row['tags'],
        screenshot_path=row['screenshotPath'],
        color_palette=_decode_palette(row['colorPalette']),
        created_at=row['createdAt'],
    )


class WebsiteStore:
    """CRUD access to the ``websites`` table."""

    def __init__(self, db_path: Path | str):
        self.db_path = db_path
        if str(db_path) != ':memory:':
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        # FastAPI runs sync endpoints in a thread pool; one connection, serialized
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        with self._lock:
            self._conn.execute(SCHEMA)
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def _write(self, sql: str, params: tuple) -> sqlite3.Cursor:
        """Execute and commit one statement, rolling back on failure."""
        with self._lock:
            try:
                cur = self._conn.execute(sql, params)
                self._conn.commit()
            except sqlite3.Error:
                self._conn.rollback()
                raise
            return cur

    def list_all(self) -> list[Website]:
        rows = self._fetchall("SELECT * FROM websites ORDER BY createdAt DESC, id DESC")
        return [_row_to_website(row) for row in rows]

    def get(self, website_id: int) -> Optional[Website]:
        row = self._fetchone("SELECT * FROM websites WHERE id = ?", (website_id,))
        return _row_to_website(row) if row else None

    def get_by_url(self, url: str) -> Optional[Website]:
        row = self._fetchone("SELECT * FROM websites WHERE url = ?", (url,))
        return _row_to_website(row) if row else None

    def add(
        self,
        *,
        url: str,
        title: str,
        screenshot_path: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[str] = None,
        color_palette: Optional[list[str]] = None,
    ) -> Website:
        """
        Insert a new entry.

        Raises:
            DuplicateWebsiteError: If the URL is already stored
        """
        created_at = datetime.now(timezone.utc).isoformat()
        palette_json = json.dumps(color_palette) if color_palette is not None else None

        try:
            cur = self._write(
                """
                INSERT INTO websites
                    (title, url, description, category, tags, screenshotPath, colorPalette, createdAt)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (title, url, description, category, tags, screenshot_path, palette_json, created_at),
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateWebsiteError(f"This website is already in your collection: {url}") from e

        return Website(
            id=cur.lastrowid,
            title=title,
            url=url,
            description=description,
            category=category,
            tags=tags,
            screenshot_path=screenshot_path,
            color_palette=list(color_palette or []),
            created_at=created_at,
        )

    def update_capture(
        self,
        website_id: int,
        *,
        title: str,
        screenshot_path: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        color_palette: Optional[list[str]] = None,
    ) -> Optional[Website]:
        """Replace the captured fields of an entry; returns the updated entry."""
        self._write(
            """
            UPDATE websites
            SET screenshotPath = ?, colorPalette = ?, title = ?, description = ?, category = ?
            WHERE id = ?
            """,
            (
                screenshot_path,
                json.dumps(color_palette) if color_palette is not None else None,
                title,
                description,
                category,
                website_id,
            ),
        )
        return self.get(website_id)

    def update_tags(self, website_id: int, tags: Optional[str]) -> Optional[Website]:
        self._write("UPDATE websites SET tags = ? WHERE id = ?", (tags, website_id))
        return self.get(website_id)

    def delete(self, website_id: int) -> bool:
        cur = self._write("DELETE FROM websites WHERE id = ?", (website_id,))
        return cur.rowcount > 0
