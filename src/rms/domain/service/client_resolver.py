"""Domain service: Client Resolver.

Find-or-create keyed on the client's national ID, so a rental always
points at a valid client. An existing client is never overwritten by
the details supplied for a new rental.
"""

from __future__ import annotations

from rms.domain.exceptions import NotFoundError, ValidationError
from rms.domain.model.client import Client
from rms.domain.repository.client_repository import ClientRepository


class ClientResolver:

    def __init__(self, client_repo: ClientRepository) -> None:
        self._client_repo = client_repo

    def resolve(
        self,
        existing_id: int | None = None,
        name: str | None = None,
        phone: str | None = None,
        dni: str | None = None,
    ) -> int:
        """Return the ID of the client the caller means.

        Raises ConflictError (from the repository) when a concurrent
        resolution created the same dni first; retrying finds that client.
        """
        if existing_id is not None:
            if self._client_repo.get_by_id(existing_id) is None:
                raise NotFoundError(f"Client #{existing_id} not found")
            return existing_id

        if not dni or not str(dni).strip():
            raise ValidationError("Either a client ID or the client's national ID is required")

        found = self._client_repo.get_by_dni(str(dni).strip())
        if found is not None:
            return found.id  # type: ignore[return-value]

        client = Client.create(dni=dni, name=name or "", phone=phone)
        self._client_repo.add(client)
        return client.id  # type: ignore[return-value]
