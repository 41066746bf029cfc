from http import HTTPStatus

import pytest

from packsizer.contracts import (
    CreatePackagingRequest,
    GetForAmountObject,
    HttpRequest,
    PackagingObject,
    PacksObject,
)
from packsizer.controllers import (
    CreatePackagingController,
    DeletePackagingByIdController,
    GetAllPackagingController,
    GetPackagingsForAmountController,
    packaging_to_object,
    packagings_to_objects,
    packs_response_to_object,
)
from packsizer.errors import CustomError
from packsizer.models import GetForAmountResponse, Pack, Packaging
from packsizer.usecases import (
    CreatePackaging,
    DeletePackaging,
    GetPackaging,
    GetPacksForAmount,
)


class FakeRepository:
    def __init__(self, packagings=()):
        self.packagings = list(packagings)
        self.created = []
        self.deleted = []
        self.error = None

    def create(self, dto):
        if self.error:
            raise self.error
        packaging = Packaging(id=f"id-{len(self.created)}", size=dto.size)
        self.created.append(packaging)
        return packaging

    def delete_by_id(self, packaging_id):
        if self.error:
            raise self.error
        if packaging_id not in {p.id for p in self.packagings}:
            raise CustomError(HTTPStatus.NOT_FOUND, "Packaging not found")
        self.deleted.append(packaging_id)

    def get_all(self):
        if self.error:
            raise self.error
        return list(self.packagings)

    def get_all_sorted_by_size(self):
        if self.error:
            raise self.error
        return sorted(self.packagings, key=lambda p: p.size, reverse=True)


def standard_packs():
    return [
        Packaging(id="5", size=5000),
        Packaging(id="4", size=2000),
        Packaging(id="3", size=1000),
        Packaging(id="2", size=500),
        Packaging(id="1", size=250),
    ]


def test_create_returns_created_packaging():
    repo = FakeRepository()
    controller = CreatePackagingController(CreatePackaging(repo))
    response = controller.handle(HttpRequest(body=CreatePackagingRequest(size=250)))
    assert response.status == HTTPStatus.CREATED
    assert response.body == PackagingObject(id=repo.created[0].id, size=250)
    assert len(repo.created) == 1


def test_create_accepts_decoded_json_body():
    repo = FakeRepository()
    controller = CreatePackagingController(CreatePackaging(repo))
    response = controller.handle(HttpRequest(body={"size": 500}))
    assert response.body.size == 500


def test_create_propagates_repository_error():
    repo = FakeRepository()
    repo.error = CustomError(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error")
    controller = CreatePackagingController(CreatePackaging(repo))
    with pytest.raises(CustomError) as info:
        controller.handle(HttpRequest(body=CreatePackagingRequest(size=250)))
    assert info.value == repo.error


def test_delete_returns_no_content():
    repo = FakeRepository(standard_packs())
    controller = DeletePackagingByIdController(DeletePackaging(repo))
    response = controller.handle(HttpRequest(params={"id": "3"}))
    assert response.status == HTTPStatus.NO_CONTENT
    assert response.body == {}
    assert repo.deleted == ["3"]


def test_delete_missing_id_propagates_not_found():
    repo = FakeRepository(standard_packs())
    controller = DeletePackagingByIdController(DeletePackaging(repo))
    with pytest.raises(CustomError) as info:
        controller.handle(HttpRequest())
    assert info.value.status == HTTPStatus.NOT_FOUND
    assert repo.deleted == []


def test_get_all_lists_packagings_in_order():
    packs = standard_packs()
    controller = GetAllPackagingController(GetPackaging(FakeRepository(packs)))
    response = controller.handle(HttpRequest())
    assert response.status == HTTPStatus.OK
    assert [obj.id for obj in response.body] == [p.id for p in packs]
    assert [obj.size for obj in response.body] == [p.size for p in packs]


def test_get_all_empty_is_empty_list():
    controller = GetAllPackagingController(GetPackaging(FakeRepository()))
    assert controller.handle(HttpRequest()).body == []


def test_get_for_amount_501():
    controller = GetPackagingsForAmountController(
        GetPacksForAmount(FakeRepository(standard_packs()))
    )
    response = controller.handle(HttpRequest(params={"amount": "501"}))
    assert response.status == HTTPStatus.OK
    body = response.body
    assert set(body.packs) == {PacksObject(500, 1), PacksObject(250, 1)}
    assert body.pack_quantity == 2
    assert body.total_amount == 750
    assert body.left_amount == 249


def test_get_for_amount_12001():
    controller = GetPackagingsForAmountController(
        GetPacksForAmount(FakeRepository(standard_packs()))
    )
    body = controller.handle(HttpRequest(params={"amount": "12001"})).body
    assert set(body.packs) == {
        PacksObject(5000, 2),
        PacksObject(2000, 1),
        PacksObject(250, 1),
    }
    assert body.pack_quantity == 4
    assert body.total_amount == 12250
    assert body.left_amount == 249


def test_get_for_amount_accepts_leading_plus():
    controller = GetPackagingsForAmountController(
        GetPacksForAmount(FakeRepository(standard_packs()))
    )
    body = controller.handle(HttpRequest(params={"amount": "+250"})).body
    assert body.packs == [PacksObject(250, 1)]
    assert body.left_amount == 0


def test_get_for_amount_negative_amount_needs_no_packs():
    controller = GetPackagingsForAmountController(
        GetPacksForAmount(FakeRepository(standard_packs()))
    )
    body = controller.handle(HttpRequest(params={"amount": "-5"})).body
    assert body.packs == []
    assert body.total_amount == 0


@pytest.mark.parametrize("amount", ["abc", "", " 5", "1_0", "1.5", "+", "9" * 30])
def test_get_for_amount_rejects_invalid_amount(amount):
    controller = GetPackagingsForAmountController(
        GetPacksForAmount(FakeRepository(standard_packs()))
    )
    with pytest.raises(CustomError) as info:
        controller.handle(HttpRequest(params={"amount": amount}))
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message == "Invalid amount"


def test_get_for_amount_without_packagings():
    controller = GetPackagingsForAmountController(GetPacksForAmount(FakeRepository()))
    with pytest.raises(CustomError) as info:
        controller.handle(HttpRequest(params={"amount": "12001"}))
    assert info.value == CustomError(HTTPStatus.BAD_REQUEST, "No packagings available")


def test_packaging_to_object_keeps_id_and_size():
    assert packaging_to_object(Packaging(id="abc", size=250)) == PackagingObject("abc", 250)


def test_packagings_to_objects_handles_none():
    assert packagings_to_objects(None) == []


def test_packs_response_to_object_maps_all_fields():
    response = GetForAmountResponse(
        packs=[Pack(size=2000, quantity=2), Pack(size=500, quantity=1)],
        pack_quantity=3,
        total_amount=4500,
        left_amount=0,
    )
    assert packs_response_to_object(response) == GetForAmountObject(
        packs=[PacksObject(2000, 2), PacksObject(500, 1)],
        pack_quantity=3,
        total_amount=4500,
        left_amount=0,
    )