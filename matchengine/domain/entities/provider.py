"""Provider entity — a cleaner who can be offered work."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderMatch:
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    rating: float | None = None
    active_clients: int = 0

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.id
