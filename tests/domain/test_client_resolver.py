"""Unit tests for the ClientResolver domain service."""

import pytest

from rms.domain.exceptions import NotFoundError, ValidationError
from rms.domain.model.client import Client
from rms.domain.service.client_resolver import ClientResolver
from tests.fakes import FakeClientRepository


def _setup(clients: list[Client] | None = None):
    repo = FakeClientRepository(clients)
    return ClientResolver(repo), repo


class TestClientResolver:

    def test_existing_id_is_returned(self):
        resolver, _ = _setup([Client(id=7, dni="30111222", name="Ana")])
        assert resolver.resolve(existing_id=7) == 7

    def test_unknown_existing_id(self):
        resolver, _ = _setup()
        with pytest.raises(NotFoundError, match="Client #7"):
            resolver.resolve(existing_id=7)

    def test_creates_client_for_new_dni(self):
        resolver, repo = _setup()
        client_id = resolver.resolve(name="Ana", phone="555-1234", dni="30111222")
        created = repo.get_by_id(client_id)
        assert created.name == "Ana"
        assert created.phone == "555-1234"

    def test_same_dni_resolves_to_same_client_without_overwriting(self):
        resolver, repo = _setup()
        first = resolver.resolve(name="Ana", phone="555-1234", dni="30111222")
        second = resolver.resolve(name="Someone Else", phone="000", dni="30111222")
        assert first == second
        assert repo.get_by_id(first).name == "Ana"
        assert len(repo.all()) == 1

    def test_dni_is_trimmed(self):
        resolver, _ = _setup([Client(id=3, dni="30111222", name="Ana")])
        assert resolver.resolve(dni="  30111222 ") == 3

    def test_dni_required_without_id(self):
        resolver, _ = _setup()
        with pytest.raises(ValidationError, match="national ID"):
            resolver.resolve(name="Ana")

    def test_name_required_for_new_client(self):
        resolver, _ = _setup()
        with pytest.raises(ValidationError, match="name is required"):
            resolver.resolve(dni="30111222")
