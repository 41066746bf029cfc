"""Packaging use cases: create, delete, list and pick packs for an amount."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from http import HTTPStatus
from typing import Protocol

from .errors import CustomError
from .models import CreatePackagingDto, GetForAmountResponse, Packaging


class PackagingRepository(Protocol):
    """Storage for packagings used by the use cases."""

    def create(self, dto: CreatePackagingDto) -> Packaging:
        """Store a new packaging and return it."""

    def delete_by_id(self, packaging_id: str) -> None:
        """Mark the packaging with ``packaging_id`` as deleted."""

    def get_all(self) -> list[Packaging]:
        """Return every packaging that is not deleted."""

    def get_all_sorted_by_size(self) -> list[Packaging]:
        """Return every packaging that is not deleted, largest size first."""


@dataclass
class CreatePackaging:
    """Creates packagings through the repository."""

    repository: PackagingRepository

    def create(self, dto: CreatePackagingDto) -> Packaging:
        return self.repository.create(CreatePackagingDto(size=dto.size))


@dataclass
class DeletePackaging:
    """Deletes packagings through the repository."""

    repository: PackagingRepository

    def delete_by_id(self, packaging_id: str) -> None:
        self.repository.delete_by_id(packaging_id)


@dataclass
class GetPackaging:
    """Lists the packagings in the repository."""

    repository: PackagingRepository

    def get_all(self) -> list[Packaging]:
        return self.repository.get_all()


@dataclass
class GetPacksForAmount:
    """Chooses the packs that ship an amount of items."""

    repository: PackagingRepository

    def get_for_amount(self, amount: int) -> GetForAmountResponse:
        """Return the fewest items over ``amount``, using the fewest packs for that total."""
        available = self.repository.get_all_sorted_by_size()
        if not available:
            raise CustomError(HTTPStatus.BAD_REQUEST, "No packagings available")
        total, combo = get_best_combo(amount, [pack.size for pack in available])
        return GetForAmountResponse.from_combo(amount, total, combo)


def get_best_combo(amount: int, pack_sizes: list[int]) -> tuple[int, dict[int, int]]:
    """Find the smallest reachable total >= ``amount`` and the fewest packs reaching it.

    Returns the total and a mapping of pack size to quantity.
    """
    if amount <= 0:
        return 0, {}

    sizes = [size for size in pack_sizes if size > 0]
    if not sizes:
        raise ValueError("at least one positive pack size is required")

    max_total = amount + max(sizes)
    fewest: list[int | None] = [None] * (max_total + 1)
    fewest[0] = 0
    last_pack = [0] * (max_total + 1)

    for size in sizes:
        for total in range(size, max_total + 1):
            before = fewest[total - size]
            if before is None:
                continue
            current = fewest[total]
            if current is None or before + 1 < current:
                fewest[total] = before + 1
                last_pack[total] = size

    best_total = next(
        total for total in range(amount, max_total + 1) if fewest[total] is not None
    )

    combo: Counter[int] = Counter()
    remaining = best_total
    while remaining > 0:
        size = last_pack[remaining]
        combo[size] += 1
        remaining -= size

    return best_total, dict(combo)