"""Record store backed directly by the PopWork Postgres schema."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy import Uuid, asc, desc, inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query as OrmQuery, RelationshipProperty, sessionmaker
from starlette.concurrency import run_in_threadpool

from app.db.models import (
    Company,
    Invoice,
    Notification,
    Project,
    Service,
    Task,
    TaskAssignee,
    TaskTimer,
    User,
)
from app.store.base import CurrentUser, Embed, Query, RecordStore, StoreError

logger = logging.getLogger(__name__)

TABLE_MODELS = {
    model.__tablename__: model
    for model in (Company, Invoice, Notification, Project, Service, Task, TaskAssignee, TaskTimer, User)
}


def _serialize(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class SqlAlchemyStore(RecordStore):
    """Serve reads and writes from ORM models, shaped like PostgREST responses.

    To-one embeds render as an object (or None), to-many embeds as a list.
    ``!inner`` embeds drop the parent row when nothing matches; to-one inner
    chains are joined in SQL so ordering and limits apply after filtering.
    Each call opens its own session and runs in the threadpool.
    """

    def __init__(self, session_factory: sessionmaker, user_id: Optional[UUID] = None) -> None:
        self._session_factory = session_factory
        self._user_id = user_id

    async def select(self, query: Query) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self._select, query)

    async def insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        return await run_in_threadpool(self._insert, table, values)

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self._update, table, values, filters)

    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        return await run_in_threadpool(self._delete, table, filters)

    async def get_current_user(self) -> Optional[CurrentUser]:
        if self._user_id is None:
            return None
        return await run_in_threadpool(self._current_user)

    # Blocking implementations

    def _select(self, query: Query) -> List[Dict[str, Any]]:
        model = self._model(query.table)
        for column in query.columns:
            self._column(model, column)
        with self._session_factory() as session:
            try:
                stmt = session.query(model)
                stmt = self._join_inner(stmt, model, query.embeds)
                stmt = self._apply_filters(stmt, model, query.filters)
                if query.order_by:
                    column = self._column(model, query.order_by)
                    stmt = stmt.order_by(desc(column) if query.descending else asc(column))
                if query.limit is not None:
                    stmt = stmt.limit(query.limit)
                records = (self._render(obj, query.columns, query.embeds) for obj in stmt.all())
                return [record for record in records if record is not None]
            except SQLAlchemyError as exc:
                raise self._wrap(exc) from exc

    def _insert(self, table: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        with self._session_factory() as session:
            try:
                obj = model(**{key: self._coerce(model, key, value) for key, value in values.items()})
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return self._render(obj, self._column_names(model), ())
            except SQLAlchemyError as exc:
                session.rollback()
                raise self._wrap(exc) from exc

    def _update(self, table: str, values: Mapping[str, Any], filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
        model = self._model(table)
        with self._session_factory() as session:
            try:
                objs = self._apply_filters(session.query(model), model, filters).all()
                for obj in objs:
                    for key, value in values.items():
                        self._column(model, key)
                        setattr(obj, key, self._coerce(model, key, value))
                session.commit()
                columns = self._column_names(model)
                return [self._render(obj, columns, ()) for obj in objs]
            except SQLAlchemyError as exc:
                session.rollback()
                raise self._wrap(exc) from exc

    def _delete(self, table: str, filters: Mapping[str, Any]) -> int:
        model = self._model(table)
        with self._session_factory() as session:
            try:
                objs = self._apply_filters(session.query(model), model, filters).all()
                for obj in objs:
                    session.delete(obj)
                session.commit()
                return len(objs)
            except SQLAlchemyError as exc:
                session.rollback()
                raise self._wrap(exc) from exc

    def _current_user(self) -> Optional[CurrentUser]:
        with self._session_factory() as session:
            user = session.get(User, self._user_id)
            if user is None:
                logger.info("No user row for id %s; treating request as anonymous", self._user_id)
                return None
            return CurrentUser(id=str(user.id), email=user.email)

    # Shape helpers

    def _join_inner(self, stmt: OrmQuery, model, embeds: Iterable[Embed]) -> OrmQuery:
        for embed in embeds:
            rel = self._relationship(model, embed.relation)
            if embed.inner and not rel.uselist:
                stmt = stmt.join(getattr(model, rel.key))
                stmt = self._join_inner(stmt, rel.mapper.class_, embed.embeds)
        return stmt

    def _render(self, obj, columns: Iterable[str], embeds: Tuple[Embed, ...]) -> Optional[Dict[str, Any]]:
        model = type(obj)
        record: Dict[str, Any] = {}
        for column in columns:
            self._column(model, column)
            record[column] = _serialize(getattr(obj, column))

        for embed in embeds:
            rel = self._relationship(model, embed.relation)
            related = getattr(obj, rel.key)
            if rel.uselist:
                children = [self._render(child, embed.columns, embed.embeds) for child in related]
                children = [child for child in children if child is not None]
                if embed.inner and not children:
                    return None
                record[embed.relation] = children
            else:
                child = self._render(related, embed.columns, embed.embeds) if related is not None else None
                if embed.inner and child is None:
                    return None
                record[embed.relation] = child
        return record

    def _apply_filters(self, stmt: OrmQuery, model, filters: Mapping[str, Any]) -> OrmQuery:
        for key, value in filters.items():
            stmt = stmt.filter(self._column(model, key) == self._coerce(model, key, value))
        return stmt

    @staticmethod
    def _model(table: str):
        model = TABLE_MODELS.get(table)
        if model is None:
            raise StoreError(f'relation "public.{table}" does not exist', code="42P01")
        return model

    @staticmethod
    def _column(model, name: str):
        columns = sa_inspect(model).columns
        if name not in columns:
            raise StoreError(
                f"column {model.__tablename__}.{name} does not exist",
                code="42703",
            )
        return columns[name]

    @staticmethod
    def _column_names(model) -> Tuple[str, ...]:
        return tuple(sa_inspect(model).columns.keys())

    @staticmethod
    def _relationship(model, relation: str) -> RelationshipProperty:
        for rel in sa_inspect(model).relationships:
            if rel.mapper.local_table.name == relation:
                return rel
        raise StoreError(
            f"Could not find a relationship between '{model.__tablename__}' and '{relation}' in the schema cache",
            code="PGRST200",
        )

    def _coerce(self, model, key: str, value: Any) -> Any:
        column = self._column(model, key)
        if isinstance(column.type, Uuid) and isinstance(value, str):
            try:
                return UUID(value)
            except ValueError:
                raise StoreError(f'invalid input syntax for type uuid: "{value}"', code="22P02") from None
        return value

    @staticmethod
    def _wrap(exc: SQLAlchemyError) -> StoreError:
        original = getattr(exc, "orig", None)
        return StoreError(str(original or exc), details=exc.__class__.__name__)
