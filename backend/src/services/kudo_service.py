"""Service layer for kudo operations scoped to a single owner."""
import logging

from models.kudo import Kudo
from schemas.kudo import GithubRepo, kudo_from_repo, repo_id_to_str
from services.kudo_store import KudoStore

logger = logging.getLogger(__name__)


class KudoService:
    """
    Kudo operations for one authenticated owner.

    The owner is bound at construction and every call is scoped to it, so a
    caller can never read or write another owner's kudos through this class.
    """

    def __init__(self, owner_id: str, store: KudoStore) -> None:
        if not owner_id:
            raise ValueError("owner_id must not be empty")
        self.owner_id = owner_id
        self.store = store

    async def list_kudos(self) -> list[Kudo]:
        """List the owner's kudos in the order they were created."""
        return await self.store.find_all(owner_id=self.owner_id)

    async def get_kudo(self, repo_id: int | str) -> Kudo | None:
        """Get the owner's kudo for a repository, or None."""
        return await self.store.find(self.owner_id, repo_id_to_str(repo_id))

    async def create_kudo(self, repo: GithubRepo) -> Kudo:
        """Give a kudo to a repository (upsert)."""
        kudo = kudo_from_repo(repo, self.owner_id)
        await self.store.create(kudo)
        logger.info(
            "kudo_created",
            extra={"owner_id": self.owner_id, "repo_id": kudo.repo_id},
        )
        return kudo

    async def update_kudo(self, repo: GithubRepo) -> Kudo:
        """
        Replace the kudo for a repository.

        Same upsert as create_kudo: updating a kudo that does not exist
        creates it.
        """
        kudo = kudo_from_repo(repo, self.owner_id)
        await self.store.update(kudo)
        logger.info(
            "kudo_updated",
            extra={"owner_id": self.owner_id, "repo_id": kudo.repo_id},
        )
        return kudo

    async def remove_kudo(self, repo: GithubRepo) -> Kudo:
        """Remove the kudo for a repository and return the mapped kudo."""
        kudo = kudo_from_repo(repo, self.owner_id)
        await self.store.delete(kudo)
        logger.info(
            "kudo_removed",
            extra={"owner_id": self.owner_id, "repo_id": kudo.repo_id},
        )
        return kudo
