"""Kudo model for storing a user's bookmarked GitHub repositories."""
from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class Kudo(Base, TimestampMixin):
    """Kudo model - one row per (owner, repository) pair."""

    __tablename__ = "kudos"
    __table_args__ = (
        UniqueConstraint("owner_id", "repo_id", name="uq_kudo_owner_repo"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(255),
        index=True,
        comment="Identity provider 'sub' claim of the user who gave the kudo",
    )
    repo_id: Mapped[str] = mapped_column(
        Text,
        comment="GitHub repository id, stored as a string",
    )
    repo_name: Mapped[str] = mapped_column(Text, default="", server_default="")
    repo_url: Mapped[str] = mapped_column(Text, default="", server_default="")
    language: Mapped[str] = mapped_column(Text, default="", server_default="")
    description: Mapped[str] = mapped_column(Text, default="", server_default="")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Kudo(owner_id={self.owner_id!r}, repo_id={self.repo_id!r})"
