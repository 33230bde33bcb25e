"""Pydantic schemas for kudo endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from models.kudo import Kudo


class GithubRepo(BaseModel):
    """
    A repository as the client receives it from the GitHub search API.

    Every field has a zero value so a partial or malformed payload still maps
    to a kudo. GitHub returns null for a missing language or description;
    those normalize to empty strings.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str = 0
    full_name: str = ""
    html_url: str = ""
    language: str = ""
    description: str = ""
    notes: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def default_id(cls, v: Any) -> Any:
        """Treat a null id as the zero id."""
        return 0 if v is None else v

    @field_validator("full_name", "html_url", "language", "description", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        """Normalize null strings to empty strings."""
        return "" if v is None else v


class KudoResponse(BaseModel):
    """Schema for kudo responses."""

    model_config = ConfigDict(from_attributes=True)

    owner_id: str
    repo_id: str
    repo_name: str
    repo_url: str
    language: str
    description: str
    notes: str | None


def repo_id_to_str(repo_id: int | str) -> str:
    """
    Convert a GitHub repository id to the stored string form.

    Integer ids use their decimal representation, which is exact for any
    integer size. String ids are stripped of surrounding whitespace.
    """
    if isinstance(repo_id, int):
        return str(repo_id)
    return repo_id.strip()


def kudo_from_repo(repo: GithubRepo, owner_id: str) -> Kudo:
    """Build a (transient, unsaved) Kudo for `owner_id` from a GitHub repository."""
    return Kudo(
        owner_id=owner_id,
        repo_id=repo_id_to_str(repo.id),
        repo_name=repo.full_name,
        repo_url=repo.html_url,
        language=repo.language,
        description=repo.description,
        notes=repo.notes,
    )
