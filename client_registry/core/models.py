from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict
from sqlalchemy import (
    Boolean,
    DateTime,
    Index,
    PrimaryKeyConstraint,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from client_registry.db import Base
from .client_secret import hash_secret, verify_secret


class Client(BaseModel):
    """A registered API consumer."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    secret_hash: str = ""
    secret_scheme: str = ""
    confidential: bool = False
    created_at: AwareDatetime
    created_by: str = ""
    created_by_ip: str = ""

    def check_secret(self, attempt: str | bytes) -> None:
        """
        Returns None if `attempt` matches the stored secret.

        Raises IncorrectSecret on a mismatch and UnsupportedSecretScheme when
        the stored scheme is unknown. A ValueError means the stored hash is
        not valid hex, i.e. the record is corrupt.
        """
        verify_secret(self.secret_scheme, self.secret_hash, attempt)


class RedirectURI(BaseModel):
    """A URI (or URI prefix, when is_base_uri is set) a Client may redirect to."""

    model_config = ConfigDict(frozen=True)

    id: str
    uri: str
    is_base_uri: bool = False
    client_id: str
    created_at: AwareDatetime
    created_by: str = ""
    created_by_ip: str = ""


class Change(BaseModel):
    """
    A sparse patch over a Client.

    None leaves a field untouched; an empty string clears it.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    secret_hash: str | None = None
    secret_scheme: str | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.secret_hash is None and self.secret_scheme is None

    def updates(self) -> dict[str, str]:
        """The fields this Change sets, keyed by Client attribute name."""
        return self.model_dump(exclude_none=True)


def change_secret(new_secret: str | bytes) -> Change:
    secret_hash, scheme = hash_secret(new_secret)
    return Change(secret_hash=secret_hash, secret_scheme=scheme)


def apply(change: Change, client: Client) -> Client:
    if change.is_empty():
        return client
    return client.model_copy(update=change.updates())


def sort_redirect_uris_by_uri(uris: list[RedirectURI]) -> None:
    # codepoint order, independent of any database collation
    uris.sort(key=lambda uri: uri.uri)


class ClientRecord(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    secret_hash: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    secret_scheme: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    confidential: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    created_by: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    created_by_ip: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    __table_args__ = (
        PrimaryKeyConstraint("id", name="clients_pkey"),
    )


class RedirectURIRecord(Base):
    __tablename__ = "redirect_uris"

    id: Mapped[str] = mapped_column(Text, nullable=False)
    uri: Mapped[str] = mapped_column(Text, nullable=False)
    is_base_uri: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    client_id: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    created_by: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    created_by_ip: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    __table_args__ = (
        PrimaryKeyConstraint("id", name="redirect_uris_pkey"),
        UniqueConstraint("uri", name="redirect_uris_unique_uri"),
        Index("ix_redirect_uris_client_id", "client_id"),
    )
