"""Domain records for packagings and pack calculations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Packaging:
    """A pack size offered for shipping."""

    id: str
    size: int
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(frozen=True)
class CreatePackagingDto:
    """Data needed to create a packaging."""

    size: int


@dataclass(frozen=True)
class Pack:
    """A number of packs of one size."""

    size: int
    quantity: int


@dataclass
class GetForAmountResponse:
    """The packs chosen to ship an amount of items."""

    packs: list[Pack]
    pack_quantity: int
    total_amount: int
    left_amount: int

    @classmethod
    def from_combo(
        cls, amount: int, total: int, combo: Mapping[int, int]
    ) -> GetForAmountResponse:
        """Build a response from a size-to-quantity mapping reaching ``total``."""
        packs = [
            Pack(size=size, quantity=quantity)
            for size, quantity in sorted(combo.items(), reverse=True)
        ]
        return cls(
            packs=packs,
            pack_quantity=sum(pack.quantity for pack in packs),
            total_amount=total,
            left_amount=total - amount,
        )