"""Kudo CRUD endpoints."""
from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_kudo_service, parse_github_repo
from schemas.kudo import GithubRepo, KudoResponse
from services.kudo_service import KudoService

router = APIRouter(prefix="/kudos", tags=["kudos"])


@router.get("", response_model=list[KudoResponse])
async def list_kudos(
    service: KudoService = Depends(get_kudo_service),
) -> list[KudoResponse]:
    """List all kudos for the current user."""
    kudos = await service.list_kudos()
    return [KudoResponse.model_validate(k) for k in kudos]


@router.post("", response_model=KudoResponse, status_code=201)
async def create_kudo(
    service: KudoService = Depends(get_kudo_service),
    repo: GithubRepo = Depends(parse_github_repo),
) -> KudoResponse:
    """Give a kudo to a GitHub repository (creating it again replaces it)."""
    kudo = await service.create_kudo(repo)
    return KudoResponse.model_validate(kudo)


@router.put("/{repo_id}", response_model=KudoResponse)
async def update_kudo(
    repo_id: str,
    service: KudoService = Depends(get_kudo_service),
    repo: GithubRepo = Depends(parse_github_repo),
) -> KudoResponse:
    """
    Replace the kudo for a repository.

    The path id is the key; an id in the body is ignored. A kudo that does
    not exist yet is created.
    """
    kudo = await service.update_kudo(repo.model_copy(update={"id": repo_id}))
    return KudoResponse.model_validate(kudo)


@router.delete("/{repo_id}")
async def delete_kudo(
    repo_id: str,
    service: KudoService = Depends(get_kudo_service),
) -> Response:
    """Remove the kudo for a repository. Removing a missing kudo succeeds."""
    await service.remove_kudo(GithubRepo(id=repo_id))
    return Response(status_code=status.HTTP_200_OK, media_type="application/json")
