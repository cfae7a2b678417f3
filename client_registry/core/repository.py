from abc import ABC, abstractmethod
from typing import Sequence

from .models import Change, Client, RedirectURI


class Storer(ABC):
    """
    Stores, retrieves and modifies Clients and their RedirectURIs.

    Every backend raises the same errors for the same situations:
    - get raises ClientNotFound; update and delete of an unknown ID are no-ops
    - create raises ClientAlreadyExists on an ID collision
    - add_redirect_uris raises RedirectURIAlreadyExists and persists nothing
      from the batch
    - remove_redirect_uris ignores IDs it doesn't know
    """

    @abstractmethod
    def create(self, client: Client) -> None: ...

    @abstractmethod
    def get(self, client_id: str) -> Client: ...

    @abstractmethod
    def update(self, client_id: str, change: Change) -> None: ...

    @abstractmethod
    def delete(self, client_id: str) -> None: ...

    @abstractmethod
    def list_redirect_uris(self, client_id: str) -> list[RedirectURI]:
        """
        Returns the client's redirect URIs sorted ascending by URI.

        An unknown client ID yields an empty list.
        """
        raise NotImplementedError

    @abstractmethod
    def add_redirect_uris(self, uris: Sequence[RedirectURI]) -> None:
        """
        Persist `uris` as a single batch.

        The owning client is not required to exist.
        """
        raise NotImplementedError

    @abstractmethod
    def remove_redirect_uris(self, ids: Sequence[str]) -> None: ...
