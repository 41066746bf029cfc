"""Request and response shapes exchanged with HTTP clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


def _json_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _as_object(data: Any, type_name: str) -> Mapping[str, Any]:
    """Return ``data`` as a JSON object; ``None`` counts as an empty one."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot unmarshal {_json_kind(data)} into {type_name}")
    return data


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look a field up case-insensitively; the last matching key wins."""
    found = None
    wanted = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == wanted:
            found = value
    return found


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"cannot unmarshal {_json_kind(value)} into field {name} of type int")
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"number {value} overflows field {name} of type int")
    return value


@dataclass
class HttpRequest:
    """A request as seen by a handler."""

    headers: dict[str, list[str]] = field(default_factory=dict)
    body: Any = None
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, list[str]] = field(default_factory=dict)
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class HttpResponse:
    """A response produced by a handler."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


@runtime_checkable
class Handler(Protocol):
    """Anything that turns an HttpRequest into an HttpResponse."""

    def handle(self, request: HttpRequest) -> HttpResponse:
        """Handle ``request`` and return the response."""


@dataclass(frozen=True)
class HttpError:
    """Error body sent to clients."""

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class EmptyRequest:
    """A request body with no fields."""

    @classmethod
    def from_json(cls, data: Any) -> EmptyRequest:
        """Accept any JSON object (or nothing) and ignore its contents."""
        _as_object(data, "EmptyRequest")
        return cls()


@dataclass(frozen=True)
class CreatePackagingRequest:
    """Body of a request to create a packaging."""

    size: int = 0

    @classmethod
    def from_json(cls, data: Any) -> CreatePackagingRequest:
        """Read the request from decoded JSON; a missing size is zero."""
        obj = _as_object(data, "CreatePackagingRequest")
        return cls(size=_as_int(_field(obj, "size"), "size", 0))


@dataclass(frozen=True)
class PackagingObject:
    """A packaging as shown to clients."""

    id: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "size": self.size}


@dataclass(frozen=True)
class PacksObject:
    """A quantity of packs of one size as shown to clients."""

    size: int
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size, "quantity": self.quantity}


@dataclass(frozen=True)
class GetForAmountObject:
    """The packs chosen for an amount, as shown to clients."""

    packs: list[PacksObject]
    pack_quantity: int
    total_amount: int
    left_amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "packs": [pack.to_dict() for pack in self.packs],
            "packQuantity": self.pack_quantity,
            "totalAmount": self.total_amount,
            "leftAmount": self.left_amount,
        }