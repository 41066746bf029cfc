from http import HTTPStatus

import pytest

from packsizer.errors import CustomError, get_custom_error


def test_str_combines_message_and_cause():
    err = CustomError(HTTPStatus.BAD_REQUEST, "Invalid amount", ValueError("bad"))
    assert str(err) == "Invalid amount: bad"


def test_is_raisable_and_keeps_fields():
    cause = KeyError("k")
    with pytest.raises(CustomError) as info:
        raise CustomError(404, "Packaging not found", cause)
    assert info.value.status == 404
    assert info.value.message == "Packaging not found"
    assert info.value.original_error is cause


def test_equality_is_structural():
    first = CustomError(400, "No packagings available")
    second = CustomError(400, "No packagings available", None)
    third = CustomError(500, "No packagings available")
    assert first == second
    assert first != third


def test_get_custom_error_wraps_plain_exception():
    cause = RuntimeError("boom")
    wrapped = get_custom_error(cause)
    assert wrapped.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert wrapped.message == "Unexpected error happened"
    assert wrapped.original_error is cause


def test_get_custom_error_keeps_status_and_message():
    original = CustomError(HTTPStatus.BAD_REQUEST, "Invalid amount", ValueError("x"))
    wrapped = get_custom_error(original)
    assert wrapped.status == 400
    assert wrapped.message == "Invalid amount"
    assert wrapped.original_error is original