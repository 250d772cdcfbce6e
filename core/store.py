"""
SQLite-backed link store for Link Shelf.

Schema
──────
table: links
  id         TEXT PRIMARY KEY   (opaque uuid hex, assigned on create)
  url        TEXT NOT NULL
  title      TEXT NOT NULL
  summary    TEXT NOT NULL
  content    TEXT NOT NULL
  category   TEXT NOT NULL
  tags       TEXT NOT NULL      (JSON array)
  source     TEXT NOT NULL
  created_at TEXT NOT NULL      (ISO-8601 UTC)

Every ``sqlite3.Error`` is wrapped in ``StoreError`` carrying a single
user-facing message.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Union

from pydantic import ValidationError

from core.library import search_links
from core.models import Category, NewLink, SavedLink

logger = logging.getLogger(__name__)

#: Fields that may be changed after creation. ``url``, ``id`` and
#: ``created_at`` are immutable; ``content`` only changes by re-adding.
UPDATABLE_FIELDS = frozenset(["title", "summary", "category", "tags"])

_COLUMNS = "id, url, title, summary, content, category, tags, source, created_at"


class StoreError(RuntimeError):
    """The link store is unavailable or rejected an operation."""


class LinkStore:
    """CRUD access to saved links in a single SQLite file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    @contextmanager
    def _connect(self, error_message: str) -> Iterator[sqlite3.Connection]:
        """Yield a connection, creating the file/dir if needed.

        Any ``sqlite3.Error`` raised inside the block is rolled back and
        re-raised as ``StoreError(error_message)``.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.path))
        except (OSError, sqlite3.Error) as exc:
            logger.exception("Could not open link store at %s", self.path)
            raise StoreError(error_message) from exc

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Link store error: %s", error_message)
            raise StoreError(error_message) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the links table if it doesn't exist yet."""
        with self._connect("Could not initialise the link store") as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS links (
                    id         TEXT PRIMARY KEY,
                    url        TEXT NOT NULL,
                    title      TEXT NOT NULL,
                    summary    TEXT NOT NULL,
                    content    TEXT NOT NULL,
                    category   TEXT NOT NULL,
                    tags       TEXT NOT NULL,
                    source     TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
        logger.info("Link store initialised at %s", self.path)

    # ── Rows ───────────────────────────────────────────────────────────────

    @staticmethod
    def _to_link(row: sqlite3.Row) -> SavedLink:
        return SavedLink(
            id=row["id"],
            url=row["url"],
            title=row["title"],
            summary=row["summary"],
            content=row["content"],
            category=Category(row["category"]),
            tags=json.loads(row["tags"]),
            source=row["source"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _to_links(self, rows: list[sqlite3.Row]) -> list[SavedLink]:
        links: list[SavedLink] = []
        for row in rows:
            try:
                links.append(self._to_link(row))
            except (ValueError, ValidationError) as exc:
                logger.warning("Skipping corrupt link id=%s: %s", row["id"], exc)
        return links

    # ── Operations ─────────────────────────────────────────────────────────

    def create(self, link: NewLink) -> SavedLink:
        """Persist *link* and return it with its new ``id`` and ``created_at``."""
        saved = SavedLink(
            **link.model_dump(),
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
        )

        with self._connect("Could not save the link") as conn:
            conn.execute(
                f"INSERT INTO links ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    saved.id,
                    saved.url,
                    saved.title,
                    saved.summary,
                    saved.content,
                    saved.category.value,
                    json.dumps(saved.tags),
                    saved.source,
                    saved.created_at.isoformat(),
                ),
            )

        logger.info("Saved link id=%s url=%s", saved.id, saved.url)
        return saved

    def list_all(self) -> list[SavedLink]:
        """Return every saved link, newest first."""
        with self._connect("Could not load the saved links") as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM links ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return self._to_links(rows)

    def list_by_category(self, category: Category) -> list[SavedLink]:
        """Return the links in *category*, newest first."""
        with self._connect("Could not load the filtered links") as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM links WHERE category = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (Category(category).value,),
            ).fetchall()
        return self._to_links(rows)

    def get(self, link_id: str) -> SavedLink | None:
        """Fetch a single link by id, or ``None`` if not found."""
        with self._connect("Could not load the link") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM links WHERE id = ?", (link_id,)
            ).fetchone()
        return self._to_link(row) if row is not None else None

    def update(self, link_id: str, **fields: object) -> bool:
        """Overwrite some fields of a link in place.

        Only ``UPDATABLE_FIELDS`` are accepted.  Changing the category does not
        re-run tagging.

        Returns:
            True if a row was updated, False if not found.

        Raises:
            ValueError: For an unknown field, an invalid category or empty tags.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if not fields:
            return self.get(link_id) is not None

        values: dict[str, object] = {}
        for name, value in fields.items():
            if name == "category":
                value = Category(value).value
            elif name == "tags":
                tags = [str(t) for t in value]  # type: ignore[union-attr]
                if not tags:
                    raise ValueError("A link must keep at least one tag.")
                value = json.dumps(tags)
            else:
                value = str(value)
            values[name] = value

        assignments = ", ".join(f"{name} = ?" for name in values)
        with self._connect("Could not update the link") as conn:
            cursor = conn.execute(
                f"UPDATE links SET {assignments} WHERE id = ?",
                (*values.values(), link_id),
            )
        updated = cursor.rowcount > 0
        if updated:
            logger.info("Updated link id=%s fields=%s", link_id, sorted(values))
        return updated

    def delete(self, link_id: str) -> bool:
        """Delete a link by id.

        Returns:
            True if a row was deleted, False if not found.
        """
        with self._connect("Could not delete the link") as conn:
            cursor = conn.execute("DELETE FROM links WHERE id = ?", (link_id,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted link id=%s", link_id)
        return deleted

    def search(self, term: str) -> list[SavedLink]:
        """Case-insensitive search over title, URL, content and category."""
        return search_links(self.list_all(), term)
