"""
Base Repository
Table-level CRUD shared by the Prism repositories
"""

from abc import ABC
from typing import Any, Dict, List, Optional, Sequence

from prism.bot.database import DatabaseContext
from prism.utils.logger import get_logger


class BaseRepository(ABC):
    """
    Base repository class for database operations.

    Conditions and record data use camelCase keys (``guildId``) and are
    mapped onto snake_case columns (``guild_id``). SQL is built with ``?``
    placeholders, so it runs on every DatabaseContext backend.
    """

    def __init__(self, db: DatabaseContext, table_name: str, primary_key: str = "id"):
        if self.__class__ == BaseRepository:
            raise TypeError("Cannot instantiate abstract BaseRepository directly")

        self.db = db
        self.table_name = table_name
        self.primary_key = primary_key
        self.logger = get_logger(self.__class__.__name__)

    def _where(self, conditions: Dict[str, Any]) -> str:
        if not conditions:
            return ""
        return " WHERE " + " AND ".join(f"{self.to_snake_case(key)} = ?" for key in conditions)

    def _select(
        self,
        conditions: Dict[str, Any],
        columns: Sequence[str] = ("*",),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> str:
        sql = f"SELECT {', '.join(columns)} FROM {self.table_name}{self._where(conditions)}"
        if order_by:
            sql += f" ORDER BY {self.to_snake_case(order_by)} {'DESC' if descending else 'ASC'}"
        if limit:
            sql += f" LIMIT {int(limit)}"
        return sql

    async def find_where(
        self,
        conditions: Optional[Dict[str, Any]] = None,
        columns: Sequence[str] = ("*",),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find records by conditions.

        Args:
            conditions: camelCase column -> value, joined with AND
            columns: snake_case columns to return
            order_by: Column to sort by
            descending: Sort direction
            limit: Maximum number of rows

        Returns:
            List of records as dicts
        """
        conditions = conditions or {}
        sql = self._select(conditions, columns, order_by, descending, limit)
        return await self.db.query_all(sql, list(conditions.values()))

    async def exists(self, conditions: Dict[str, Any]) -> bool:
        """Check if a record matching conditions exists."""
        row = await self.db.query_one(
            self._select(conditions, (self.primary_key,), limit=1),
            list(conditions.values()),
        )
        return row is not None

    async def create(self, data: Dict[str, Any]) -> int:
        """
        Insert a record.

        Returns:
            Id of the new record

        Raises:
            DuplicateEntryError: If a unique constraint rejects the row
        """
        columns = ", ".join(self.to_snake_case(key) for key in data)
        placeholders = ", ".join("?" * len(data))

        sql = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders})"
        return await self.db.execute(sql, list(data.values()))

    async def delete_where(self, conditions: Dict[str, Any]) -> int:
        """Delete matching records and return how many were removed."""
        if not conditions:
            raise ValueError("Delete conditions cannot be empty")

        sql = f"DELETE FROM {self.table_name}{self._where(conditions)}"
        return await self.db.execute(sql, list(conditions.values()))

    @staticmethod
    def to_snake_case(s: str) -> str:
        """Convert camelCase to snake_case."""
        return "".join(f"_{c.lower()}" if c.isupper() and i else c.lower() for i, c in enumerate(s))
