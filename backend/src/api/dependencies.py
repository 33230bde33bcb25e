"""FastAPI dependencies for injection."""
import logging

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import get_current_owner
from core.config import get_settings
from db.session import get_async_session
from schemas.kudo import GithubRepo
from services.kudo_service import KudoService
from services.kudo_store import KudoStore

logger = logging.getLogger(__name__)


async def get_kudo_service(
    owner_id: str = Depends(get_current_owner),
    db: AsyncSession = Depends(get_async_session),
) -> KudoService:
    """
    Dependency that builds a KudoService bound to the authenticated owner.

    The owner dependency is declared first so authentication is resolved
    before a database session is opened.
    """
    return KudoService(owner_id, KudoStore(db))


async def parse_github_repo(request: Request) -> GithubRepo:
    """
    Dependency that reads the request body as a GithubRepo.

    Parsing is lenient: an unreadable body falls back to an empty GithubRepo
    instead of rejecting the request.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        logger.warning("malformed_kudo_body", extra={"path": request.url.path})
        return GithubRepo()

    try:
        return GithubRepo.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            "malformed_kudo_body",
            extra={"path": request.url.path, "errors": e.error_count()},
        )
        return GithubRepo()


__all__ = [
    "get_async_session",
    "get_current_owner",
    "get_kudo_service",
    "get_settings",
    "parse_github_repo",
]
