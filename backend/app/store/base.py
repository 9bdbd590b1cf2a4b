"""Record store interface shared by the hosted and direct-SQL backends."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


class StoreError(Exception):
    """A read or write against the record store failed.

    Mirrors the PostgREST error body so callers can log the full payload.
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status_code = status_code

    @property
    def payload(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "hint": self.hint,
        }


@dataclass(frozen=True)
class Embed:
    """A related collection embedded in a read."""

    relation: str
    columns: Tuple[str, ...]
    inner: bool = False
    embeds: Tuple["Embed", ...] = ()

    def render(self) -> str:
        name = f"{self.relation}!inner" if self.inner else self.relation
        parts = list(self.columns) + [child.render() for child in self.embeds]
        return f"{name}({','.join(parts)})"


@dataclass(frozen=True)
class Query:
    """A read against one collection with its embedded join shape."""

    table: str
    columns: Tuple[str, ...]
    embeds: Tuple[Embed, ...] = ()
    filters: Mapping[str, Any] = field(default_factory=dict)
    order_by: Optional[str] = "created_at"
    descending: bool = True
    limit: Optional[int] = None

    def select_clause(self) -> str:
        return ",".join(list(self.columns) + [embed.render() for embed in self.embeds])


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str] = None


class RecordStore:
    """Base interface for record store backends."""

    async def select(self, query: Query) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        raise NotImplementedError

    async def get_current_user(self) -> Optional[CurrentUser]:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
