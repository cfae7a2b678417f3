"""Exceptions shared by every Storer backend."""

from __future__ import annotations


class ClientRegistryError(RuntimeError):
    """Base class for client registry errors."""


class ClientNotFound(ClientRegistryError):
    """Client does not exist in the Storer."""

    def __init__(self, client_id: str | None = None) -> None:
        self.client_id = client_id
        super().__init__("client not found")


class ClientAlreadyExists(ClientRegistryError):
    """A client with the same ID already exists in the Storer."""

    def __init__(self, client_id: str | None = None) -> None:
        self.client_id = client_id
        super().__init__("client already exists")


class RedirectURIAlreadyExists(ClientRegistryError):
    """
    A redirect URI with the same ID or URI already exists in the Storer.

    Exactly one of ``id`` or ``uri`` is set when the conflicting field could
    be identified. When it could not, both are None and ``err`` holds the
    underlying engine error.
    """

    def __init__(
        self,
        *,
        id: str | None = None,
        uri: str | None = None,
        err: BaseException | None = None,
    ) -> None:
        self.id = id
        self.uri = uri
        self.err = err
        super().__init__(self._message())

    def _message(self) -> str:
        if self.id is None and self.uri is None and self.err is not None:
            return str(self.err)
        if self.id is None:
            return f"redirect URI {self.uri!r} already exists"
        return f"redirect URI {self.id!r} already exists"


class IncorrectSecret(ClientRegistryError):
    """Client tried to authenticate with the wrong secret."""

    def __init__(self) -> None:
        super().__init__("incorrect client secret")


class UnsupportedSecretScheme(ClientRegistryError):
    """Client secret was stored with a scheme we don't know how to check."""

    def __init__(self, scheme: str | None = None) -> None:
        self.scheme = scheme
        super().__init__("an unsupported secret scheme was used")
