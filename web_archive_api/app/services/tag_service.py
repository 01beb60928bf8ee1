"""
Service layer for tags.

``TagService`` holds the persistence primitives used by the tag
endpoints.  Every method takes the connection from the request
context instead of opening its own, so one request uses one
connection.  Write methods return ``True`` when a row was affected and
``False`` otherwise; callers decide how to report a ``False``.

The list of page ids is stored as a JSON array in ``tags.page_ids``.
Changes to it go through ``modify_page_ids``, which reads and writes
the row inside a single ``BEGIN IMMEDIATE`` transaction so that two
concurrent bind requests on the same tag cannot overwrite each other.

All queries use parameterized statements.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Callable, List, Optional

from web_archive_api.app.schemas.tag import TagRead


logger = logging.getLogger(__name__)

# SQLite stores INTEGER PRIMARY KEY values as signed 64-bit integers.
MAX_TAG_ID = 2 ** 63 - 1


class TagNotFoundError(LookupError):
    """Raised when a tag id does not match any row."""

    def __init__(self, tag_id: int) -> None:
        super().__init__(f"Tag {tag_id} not found")
        self.tag_id = tag_id


class TagService:
    """Service class for managing tags."""

    @classmethod
    async def select_all_tags(cls, db: sqlite3.Connection) -> List[TagRead]:
        """Return every tag ordered by id."""
        rows = db.execute("SELECT * FROM tags ORDER BY id ASC").fetchall()
        return [cls._row_to_tag_read(row) for row in rows]

    @classmethod
    async def get_tag_by_id(cls, db: sqlite3.Connection, tag_id: int) -> TagRead:
        """Return a single tag or raise ``TagNotFoundError``."""
        if not cls._valid_id(tag_id):
            raise TagNotFoundError(tag_id)
        row = db.execute("SELECT * FROM tags WHERE id = ?", (tag_id,)).fetchone()
        if row is None:
            raise TagNotFoundError(tag_id)
        return cls._row_to_tag_read(row)

    @classmethod
    async def insert_tag(cls, db: sqlite3.Connection, name: str, color: Any) -> bool:
        cursor = db.execute(
            "INSERT INTO tags (name, color, page_ids) VALUES (?, ?, '[]')",
            (name, color),
        )
        db.commit()
        if cursor.rowcount != 1:
            return False
        logger.info("Created tag %s (%s)", cursor.lastrowid, name)
        return True

    @classmethod
    async def update_tag(
        cls,
        db: sqlite3.Connection,
        tag_id: int,
        name: Any = None,
        color: Any = None,
        page_ids: Optional[List[Any]] = None,
    ) -> bool:
        """Update the given fields of a tag.

        Fields left as ``None`` keep their stored value.  Returns
        ``False`` when nothing was given or no tag has ``tag_id``.
        """
        if not cls._valid_id(tag_id):
            return False
        assignments = []
        params: list[Any] = []
        if name is not None:
            assignments.append("name = ?")
            params.append(name)
        if color is not None:
            assignments.append("color = ?")
            params.append(color)
        if page_ids is not None:
            assignments.append("page_ids = ?")
            params.append(json.dumps(page_ids))
        if not assignments:
            return False
        params.append(tag_id)
        cursor = db.execute(
            f"UPDATE tags SET {', '.join(assignments)}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            params,
        )
        db.commit()
        if cursor.rowcount == 0:
            logger.warning("Update matched no tag with id %s", tag_id)
            return False
        logger.info("Updated tag %s", tag_id)
        return True

    @classmethod
    async def delete_tag_by_id(cls, db: sqlite3.Connection, tag_id: int) -> bool:
        if not cls._valid_id(tag_id):
            return False
        cursor = db.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
        db.commit()
        if cursor.rowcount == 0:
            logger.warning("Delete matched no tag with id %s", tag_id)
            return False
        logger.info("Deleted tag %s", tag_id)
        return True

    @classmethod
    async def modify_page_ids(
        cls,
        db: sqlite3.Connection,
        tag_id: int,
        func: Callable[[List[Any]], List[Any]],
    ) -> bool:
        """Replace a tag's page ids with ``func(current_page_ids)``.

        The read and the write happen in one immediate transaction, which
        holds the database write lock from the first statement.  Raises
        ``TagNotFoundError`` if the tag does not exist.
        """
        if not cls._valid_id(tag_id):
            raise TagNotFoundError(tag_id)
        db.execute("BEGIN IMMEDIATE")
        try:
            row = db.execute("SELECT page_ids FROM tags WHERE id = ?", (tag_id,)).fetchone()
            if row is None:
                raise TagNotFoundError(tag_id)
            page_ids = func(cls._load_page_ids(row["page_ids"]))
            cursor = db.execute(
                "UPDATE tags SET page_ids = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (json.dumps(page_ids), tag_id),
            )
            db.commit()
        except BaseException:
            db.rollback()
            raise
        return cursor.rowcount > 0

    @classmethod
    async def bind_pages(cls, db: sqlite3.Connection, tag_id: int, page_ids: List[Any]) -> bool:
        """Add ``page_ids`` to a tag, keeping each id once."""

        def _union(current: List[Any]) -> List[Any]:
            merged: List[Any] = []
            for page_id in [*current, *page_ids]:
                if not cls._contains(merged, page_id):
                    merged.append(page_id)
            return merged

        updated = await cls.modify_page_ids(db, tag_id, _union)
        if updated:
            logger.info("Bound pages %s to tag %s", page_ids, tag_id)
        return updated

    @classmethod
    async def unbind_pages(cls, db: sqlite3.Connection, tag_id: int, page_ids: List[Any]) -> bool:
        """Remove every id in ``page_ids`` from a tag."""

        def _difference(current: List[Any]) -> List[Any]:
            return [page_id for page_id in current if not cls._contains(page_ids, page_id)]

        updated = await cls.modify_page_ids(db, tag_id, _difference)
        if updated:
            logger.info("Unbound pages %s from tag %s", page_ids, tag_id)
        return updated

    @staticmethod
    def _valid_id(tag_id: int) -> bool:
        return 0 <= tag_id <= MAX_TAG_ID

    @staticmethod
    def _contains(page_ids: List[Any], page_id: Any) -> bool:
        """Membership by equality; ``True`` and ``1`` count as different ids."""
        return any(
            other == page_id and isinstance(other, bool) == isinstance(page_id, bool)
            for other in page_ids
        )

    @staticmethod
    def _load_page_ids(value: Optional[str]) -> List[Any]:
        if not value:
            return []
        page_ids = json.loads(value)
        return page_ids if isinstance(page_ids, list) else []

    @classmethod
    def _row_to_tag_read(cls, row: sqlite3.Row) -> TagRead:
        """Convert a database row to a TagRead schema instance."""
        return TagRead(
            id=row["id"],
            name=row["name"],
            color=row["color"],
            page_ids=cls._load_page_ids(row["page_ids"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
