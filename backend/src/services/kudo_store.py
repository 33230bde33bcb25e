"""Persistence layer for kudos, keyed by (owner_id, repo_id)."""
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.ext.asyncio import AsyncSession

from models.kudo import Kudo

logger = logging.getLogger(__name__)

# Columns written on insert; everything except the key is replaced on conflict
_KEY_COLUMNS = ("owner_id", "repo_id")
_VALUE_COLUMNS = ("repo_name", "repo_url", "language", "description", "notes")


def _upsert_statement(kudo: Kudo) -> Insert:
    """Build an INSERT ... ON CONFLICT DO UPDATE for a single kudo."""
    values = {column: getattr(kudo, column) for column in _KEY_COLUMNS + _VALUE_COLUMNS}
    stmt = insert(Kudo).values(**values)
    return stmt.on_conflict_do_update(
        constraint="uq_kudo_owner_repo",
        set_={
            **{column: stmt.excluded[column] for column in _VALUE_COLUMNS},
            "updated_at": func.clock_timestamp(),
        },
    )


class KudoStore:
    """
    Record store over the kudos table.

    Every operation addresses rows through explicit criteria; the store holds
    no state besides the session it was given. Database errors propagate
    unmodified and nothing is retried. Writes are committed by whoever owns
    the session (the request-scoped session dependency in the API).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find(self, owner_id: str, repo_id: str) -> Kudo | None:
        """Get a single kudo by key, or None if it does not exist."""
        result = await self.db.execute(
            select(Kudo)
            .where(Kudo.owner_id == owner_id, Kudo.repo_id == repo_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def find_all(self, owner_id: str | None = None) -> list[Kudo]:
        """
        Get all kudos, optionally restricted to one owner.

        Results are returned in insertion order.
        """
        query = select(Kudo).order_by(Kudo.id).execution_options(populate_existing=True)
        if owner_id is not None:
            query = query.where(Kudo.owner_id == owner_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create(self, *kudos: Kudo) -> None:
        """
        Upsert one or more kudos by (owner_id, repo_id).

        Statements run in order; the first failure is raised and the remaining
        kudos are not written.
        """
        for kudo in kudos:
            await self.db.execute(_upsert_statement(kudo))

    async def update(self, kudo: Kudo) -> None:
        """Replace a kudo by key (same upsert as create)."""
        await self.db.execute(_upsert_statement(kudo))

    async def delete(self, kudo: Kudo) -> None:
        """Delete a kudo by key. Deleting a missing kudo is a no-op."""
        result = await self.db.execute(
            delete(Kudo).where(
                Kudo.owner_id == kudo.owner_id,
                Kudo.repo_id == kudo.repo_id,
            ),
        )
        if result.rowcount == 0:
            logger.debug(
                "kudo_delete_missing",
                extra={"owner_id": kudo.owner_id, "repo_id": kudo.repo_id},
            )

    async def count(self) -> int:
        """Count all kudos across all owners."""
        result = await self.db.execute(select(func.count()).select_from(Kudo))
        return result.scalar_one()
