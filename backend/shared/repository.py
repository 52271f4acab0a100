"""
Base class for Supabase table repositories.

Each repository owns one table. Rows come back from PostgREST as dicts;
subclasses map them to pydantic models and never hand raw rows upward.
"""

from typing import Any, ClassVar, Generic, Optional, TypeVar

from supabase import Client

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Table access shared by all repositories.

    Subclasses set ``table_name`` and build queries from ``_table()``:

        class ProfileRepository(BaseRepository[Profile]):
            table_name = "profiles"

            def get_by_user_id(self, user_id: str) -> Optional[Profile]:
                row = self._first(self._table().select("*").eq("user_id", user_id))
                return self._map_to_profile(row) if row else None
    """

    table_name: ClassVar[str] = ""

    def __init__(self, db: Client) -> None:
        self._db = db

    def _table(self) -> Any:
        """Query builder for this repository's table."""
        return self._db.table(self.table_name)

    @staticmethod
    def _first(query: Any) -> Optional[dict[str, Any]]:
        """Execute a query and return its first row, or None when empty."""
        rows = BaseRepository._rows(query.limit(1))
        return rows[0] if rows else None

    @staticmethod
    def _rows(query: Any) -> list[dict[str, Any]]:
        """Execute a query and return its rows (never None)."""
        return query.execute().data or []
