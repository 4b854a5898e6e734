"""Client aggregate, identified by its national ID (``dni``)."""

from __future__ import annotations

from dataclasses import dataclass

from rms.domain.exceptions import ValidationError


@dataclass
class Client:

    id: int | None
    dni: str
    name: str
    phone: str | None = None

    @staticmethod
    def create(dni: str, name: str, phone: str | None = None) -> Client:
        if not dni or not str(dni).strip():
            raise ValidationError("Client national ID (dni) is required")
        if not name or not name.strip():
            raise ValidationError("Client name is required")
        return Client(
            id=None,
            dni=str(dni).strip(),
            name=name.strip(),
            phone=phone.strip() if phone else None,
        )

    def update_details(self, name: str | None = None, phone: str | None = None) -> None:
        if name is not None:
            if not name.strip():
                raise ValidationError("Client name cannot be blank")
            self.name = name.strip()
        if phone is not None:
            self.phone = phone.strip() or None
