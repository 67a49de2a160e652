"""Abstract interface for name-to-id resolution."""

from abc import ABC, abstractmethod

from stockroom.core.entities.reference import ReferenceKind


class IReferenceResolver(ABC):
    """
    Maps human-readable labels to entity ids.

    A label with no match resolves to None; callers decide whether a missing
    reference is fatal.
    """

    @abstractmethod
    async def resolve(self, kind: ReferenceKind, label: str | None) -> int | None:
        """Return the id of the entity of ``kind`` named exactly ``label``."""
        pass

    async def resolve_many(
        self, labels: dict[ReferenceKind, str | None]
    ) -> dict[ReferenceKind, int | None]:
        """Resolve several labels independently."""
        return {kind: await self.resolve(kind, label) for kind, label in labels.items()}
