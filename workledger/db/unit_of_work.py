"""Unit of work: one transaction around a group of repository calls."""

from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession


class UnitOfWork:
    """Async context manager that commits explicitly and rolls back otherwise.

    Usage:
        async with UnitOfWork(db) as uow:
            await repo.update(db, ...)
            await uow.commit()

    Leaving the block without ``commit()`` (or with an exception) rolls the
    transaction back, so a failed check leaves no partial mutation.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Bind to an existing session."""
        self.session = session
        self._committed = False

    async def __aenter__(self) -> "UnitOfWork":
        """Enter the transaction scope."""
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        """Roll back unless the work was committed."""
        if exc_type is not None or not self._committed:
            await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction."""
        await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Roll back the transaction."""
        await self.session.rollback()
