"""HTTP handlers for packaging operations."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from http import HTTPStatus

from .contracts import (
    CreatePackagingRequest,
    GetForAmountObject,
    HttpRequest,
    HttpResponse,
    PackagingObject,
    PacksObject,
)
from .errors import CustomError
from .models import CreatePackagingDto, GetForAmountResponse, Packaging
from .usecases import CreatePackaging, DeletePackaging, GetPackaging, GetPacksForAmount

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


def packaging_to_object(model: Packaging) -> PackagingObject:
    """Map a domain packaging to its client representation."""
    return PackagingObject(id=model.id, size=model.size)


def packagings_to_objects(models: Iterable[Packaging] | None) -> list[PackagingObject]:
    """Map domain packagings to client representations, keeping their order."""
    return [packaging_to_object(model) for model in models or ()]


def packs_response_to_object(response: GetForAmountResponse) -> GetForAmountObject:
    """Map a pack calculation to its client representation."""
    return GetForAmountObject(
        packs=[PacksObject(size=p.size, quantity=p.quantity) for p in response.packs],
        pack_quantity=response.pack_quantity,
        total_amount=response.total_amount,
        left_amount=response.left_amount,
    )


def _parse_amount(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


@dataclass
class CreatePackagingController:
    """Creates a packaging from a CreatePackagingRequest body."""

    use_case: CreatePackaging

    def handle(self, request: HttpRequest) -> HttpResponse:
        body = request.body
        if not isinstance(body, CreatePackagingRequest):
            body = CreatePackagingRequest.from_json(body)
        pack = self.use_case.create(CreatePackagingDto(size=body.size))
        return HttpResponse(status=HTTPStatus.CREATED, body=packaging_to_object(pack))


@dataclass
class DeletePackagingByIdController:
    """Deletes the packaging named by the ``id`` path parameter."""

    use_case: DeletePackaging

    def handle(self, request: HttpRequest) -> HttpResponse:
        self.use_case.delete_by_id(request.params.get("id", ""))
        return HttpResponse(status=HTTPStatus.NO_CONTENT, body={})


@dataclass
class GetAllPackagingController:
    """Lists every available packaging."""

    use_case: GetPackaging

    def handle(self, request: HttpRequest) -> HttpResponse:
        packs = self.use_case.get_all()
        return HttpResponse(status=HTTPStatus.OK, body=packagings_to_objects(packs))


@dataclass
class GetPackagingsForAmountController:
    """Chooses packs for the ``amount`` path parameter."""

    use_case: GetPacksForAmount

    def handle(self, request: HttpRequest) -> HttpResponse:
        text = request.params.get("amount", "")
        try:
            amount = _parse_amount(text)
        except ValueError as err:
            raise CustomError(HTTPStatus.BAD_REQUEST, "Invalid amount", err) from err
        response = self.use_case.get_for_amount(amount)
        return HttpResponse(status=HTTPStatus.OK, body=packs_response_to_object(response))