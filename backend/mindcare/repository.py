from __future__ import annotations
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.db import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """
    Narrow table access used by the services: point lookup, filtered and
    ordered listing, bulk insert and keyed update. Filters are column equality.
    SQLAlchemy errors propagate; callers decide how to degrade.
    """

    def __init__(self, db: AsyncSession, model: type[ModelT]):
        self.db = db
        self.model = model

    def _conditions(self, filters: dict[str, Any]):
        return [getattr(self.model, name) == value for name, value in filters.items()]

    async def get(self, ident: Any) -> Optional[ModelT]:
        return await self.db.get(self.model, ident)

    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        options: Sequence[Any] = (),
    ) -> list[ModelT]:
        q = select(self.model).where(*self._conditions(filters or {}))
        if order_by:
            column = getattr(self.model, order_by)
            q = q.order_by(column.desc() if descending else column.asc())
        if options:
            q = q.options(*options)
        # rows already in the session are refreshed, not served from the identity map
        q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def insert_many(self, rows: list[dict[str, Any]]) -> None:
        if not rows:
            return
        await self.db.execute(insert(self.model), rows)
        await self.db.commit()

    async def update_where(self, values: dict[str, Any], **filters: Any) -> int:
        res = await self.db.execute(
            update(self.model)
            .where(*self._conditions(filters))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return res.rowcount
