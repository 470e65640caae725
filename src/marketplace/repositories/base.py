"""Base repository with common data access operations."""

import base64
from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import SQLModel, select

from src.marketplace.models.base import utc_now

ModelType = TypeVar("ModelType", bound=SQLModel)


def encode_cursor(position: int) -> str:
    """Encode the id of the last row on a page as an opaque cursor."""
    return base64.urlsafe_b64encode(str(position).encode()).decode()


def decode_cursor(cursor: str) -> int:
    """Decode a cursor back to the row id it was built from.

    Raises:
        ValueError: If cursor was not produced by `encode_cursor`
    """
    try:
        return int(base64.urlsafe_b64decode(cursor.encode()).decode())
    except ValueError as e:
        raise ValueError("Invalid cursor") from e


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    is done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no flush/commit)."""
        await self.session.delete(entity)

    async def update_if_status(self, entity: ModelType, expected: str, **values: Any) -> bool:
        """Update a row only while it still holds the `expected` status.

        The guard lives in the UPDATE's WHERE clause, so a concurrent writer
        that changed the status first leaves this call with zero affected rows.
        On success the loaded entity is brought in line with the new values.

        Args:
            entity: Loaded row to update
            expected: Status the caller read before deciding
            **values: Columns to set

        Returns:
            True if the row was updated, False if the guard did not match
        """
        model = cast(Any, self.model)
        values = {"updated_at": utc_now(), **values}
        stmt = (
            update(model)
            .where(model.id == entity.id, model.status == expected)  # type: ignore[attr-defined]
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if cast(CursorResult[Any], result).rowcount != 1:
            return False
        for key, value in values.items():
            set_committed_value(entity, key, value)
        return True

    async def transition_status(
        self, entity: ModelType, expected: str, new: str, **values: Any
    ) -> bool:
        """Compare-and-swap a row's status from `expected` to `new`."""
        return await self.update_if_status(entity, expected, status=new, **values)

    async def paginate(
        self,
        query: Any,  # SelectOfScalar or Select - SQLModel/SQLAlchemy query
        cursor: str | None,
        limit: int,
        id_column: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset pagination on an integer id column, newest first.

        Args:
            query: The base SQLAlchemy query to paginate
            cursor: Cursor from the previous page
            limit: Maximum number of items to return
            id_column: Autoincrement id used for ordering and the cursor

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        if cursor:
            try:
                query = query.where(id_column < decode_cursor(cursor))
            except ValueError:
                # Invalid cursor - ignore and start from beginning
                pass

        query = query.order_by(id_column.desc()).limit(limit + 1)

        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            next_cursor = encode_cursor(getattr(items[-1], id_column.key))

        return items, next_cursor, has_more
