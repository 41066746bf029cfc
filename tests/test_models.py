from datetime import datetime

from packsizer.models import CreatePackagingDto, GetForAmountResponse, Pack, Packaging


def test_from_combo_source_example():
    response = GetForAmountResponse.from_combo(501, 750, {250: 1, 500: 1})
    assert response.packs == [Pack(500, 1), Pack(250, 1)]
    assert response.pack_quantity == 2
    assert response.total_amount == 750
    assert response.left_amount == 249


def test_from_combo_quantity_is_sum_of_packs():
    combo = {5000: 2, 2000: 1, 250: 1}
    response = GetForAmountResponse.from_combo(12001, 12250, combo)
    assert response.pack_quantity == sum(combo.values())
    assert {p.size: p.quantity for p in response.packs} == combo
    assert response.left_amount == 249


def test_from_combo_sizes_descending():
    response = GetForAmountResponse.from_combo(1, 250, {250: 3, 5000: 1, 1000: 2})
    sizes = [pack.size for pack in response.packs]
    assert sizes == sorted(sizes, reverse=True)


def test_from_combo_empty():
    response = GetForAmountResponse.from_combo(0, 0, {})
    assert response.packs == []
    assert response.pack_quantity == 0
    assert response.left_amount == 0


def test_packaging_defaults():
    packaging = Packaging(id="5", size=5000)
    assert packaging.size == 5000
    assert packaging.updated_at is None
    assert packaging.deleted_at is None
    assert packaging.created_at.tzinfo is not None
    assert packaging.created_at <= datetime.now(packaging.created_at.tzinfo)


def test_dto_equality():
    assert CreatePackagingDto(250) == CreatePackagingDto(size=250)