"""Abstract repository for Client aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.model.client import Client


class ClientRepository(ABC):

    @abstractmethod
    def get_by_id(self, client_id: int) -> Client | None:
        """Return a client by its ID, or None if not found."""

    @abstractmethod
    def get_by_dni(self, dni: str) -> Client | None:
        """Return a client by national ID, or None if not found."""

    @abstractmethod
    def add(self, client: Client) -> None:
        """Persist a new client and assign its ID.

        Raises ConflictError when another client already owns the dni.
        """

    @abstractmethod
    def save(self, client: Client) -> None:
        """Persist changes to an existing client."""
