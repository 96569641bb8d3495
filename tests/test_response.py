"""Unit tests for Response status classification."""

from __future__ import annotations

import pytest

from toget import RawResponse, Response, ResponseStatusError


def _response(status_code: int, body=None) -> Response:
    return Response.from_raw(RawResponse(status_code=status_code, headers={}, body=body))


def test_copies_raw_fields() -> None:
    raw = RawResponse(
        status_code=201,
        headers={"content-type": "application/json"},
        body={"id": 3},
        url="http://localhost/user",
        method="POST",
    )
    response = Response.from_raw(raw)

    assert response.raw is raw
    assert response.status_code == 201
    assert response.headers == {"content-type": "application/json"}
    assert response.body == {"id": 3}
    assert response.url == "http://localhost/user"
    assert response.method == "POST"


def test_not_found_classification() -> None:
    response = _response(404)

    assert response.status_class == 4
    assert response.is_client_error is True
    assert response.is_ok is False
    assert response.is_server_error is False
    assert response.status["notFound"] is True


@pytest.mark.parametrize(
    "code,attribute",
    [
        (100, "is_informational"),
        (204, "is_ok"),
        (418, "is_client_error"),
        (503, "is_server_error"),
    ],
)
def test_range_predicates(code: int, attribute: str) -> None:
    response = _response(code)
    predicates = ("is_informational", "is_ok", "is_client_error", "is_server_error")

    assert {name: getattr(response, name) for name in predicates} == {
        name: name == attribute for name in predicates
    }


def test_exactly_one_status_flag_is_set() -> None:
    flags = _response(200).status

    assert [name for name, value in flags.items() if value] == ["ok"]
    assert len(flags) > 50


def test_unknown_status_has_no_flag() -> None:
    response = _response(299)

    assert not any(response.status.values())
    assert response.is_ok is True


def test_status_flags_are_read_only() -> None:
    with pytest.raises(TypeError):
        _response(200).status["ok"] = False  # type: ignore[index]


def test_success_has_no_error() -> None:
    assert _response(200).error is False
    assert _response(302, body="").error is False


def test_error_returns_body_when_present() -> None:
    assert _response(500, body={"msg": "x"}).error == {"msg": "x"}


def test_error_builds_exception_from_status_name() -> None:
    error = _response(404).error

    assert isinstance(error, ResponseStatusError)
    assert str(error) == "Response got notFound"
    assert error.status_code == 404


def test_error_falls_back_to_status_class() -> None:
    error = _response(599, body="").error

    assert str(error) == "Response got 5"


def test_error_is_stable_per_instance() -> None:
    response = _response(503)

    assert response.error is response.error


def test_response_is_immutable() -> None:
    response = _response(200)

    with pytest.raises(AttributeError):
        response.status_code = 500  # type: ignore[misc]
