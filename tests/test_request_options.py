"""Unit tests for RequestBuilder option building."""

from __future__ import annotations

import pytest

from toget import InvalidArgument, PathTemplateError, RequestBuilder

BASE = "http://localhost:3000"


@pytest.mark.parametrize("base", [None, "", "localhost:3000", "/user", "http://"])
def test_builder_requires_base(base) -> None:
    with pytest.raises(InvalidArgument):
        RequestBuilder(base)


@pytest.mark.parametrize(
    "base,expected",
    [
        ("http://localhost:3000", "http://localhost:3000/"),
        ("http://localhost:3000/ignored/path?x=1#frag", "http://localhost:3000/"),
        ("https://user:pw@example.com:8443", "https://user:pw@example.com:8443/"),
    ],
)
def test_clean_options_only_contain_url(base: str, expected: str) -> None:
    assert RequestBuilder(base).to_options() == {"url": expected}


def test_full_put_options() -> None:
    builder = (
        RequestBuilder(BASE)
        .put("/user/:id", {"id": 123})
        .json()
        .body({"age": 40})
        .query({"key": "value"})
        .headers({"authorization": "w6et7iyuhljhbgvjchf"})
    )

    assert builder.to_options() == {
        "method": "PUT",
        "json": True,
        "body": {"age": 40},
        "headers": {"authorization": "w6et7iyuhljhbgvjchf"},
        "url": "http://localhost:3000/user/123?key=value",
    }


def test_second_verb_overwrites_method_and_path() -> None:
    options = RequestBuilder(BASE).get("/first").delete("/second").to_options()

    assert options == {"method": "DELETE", "url": "http://localhost:3000/second"}


@pytest.mark.parametrize("method", ["get", "delete"])
def test_body_dropped_for_methods_without_body(method: str) -> None:
    builder = getattr(RequestBuilder(BASE), method)("/user").body({"name": "x"})

    assert "body" not in builder.to_options()


@pytest.mark.parametrize("method", ["post", "put"])
def test_body_kept_for_post_and_put(method: str) -> None:
    payload = {"name": "x"}
    builder = getattr(RequestBuilder(BASE), method)("/user").body(payload)

    assert builder.to_options()["body"] is payload


def test_body_dropped_when_no_verb_called() -> None:
    assert RequestBuilder(BASE).body("data").to_options() == {"url": "http://localhost:3000/"}


def test_path_params_substituted() -> None:
    options = RequestBuilder(BASE).get("/user/:id/posts/:post", {"id": 123, "post": "a b"}).to_options()

    assert options["url"] == "http://localhost:3000/user/123/posts/a%20b"


def test_non_mapping_path_params_are_ignored() -> None:
    options = RequestBuilder(BASE).get("/user/:id", "not-a-mapping").to_options()

    assert options["url"] == "http://localhost:3000/user/:id"


def test_path_substitution_is_lazy() -> None:
    builder = RequestBuilder(BASE).get("/user/:id", {})

    with pytest.raises(PathTemplateError):
        builder.to_options()


def test_relative_path_gets_leading_slash() -> None:
    assert RequestBuilder(BASE).get("user").to_options()["url"] == "http://localhost:3000/user"


def test_query_accepts_string_and_sequences() -> None:
    assert RequestBuilder(BASE).get("/a").query("?x=1&y=2").to_options()["url"] == (
        "http://localhost:3000/a?x=1&y=2"
    )
    assert RequestBuilder(BASE).get("/a").query({"tag": ["a", "b"]}).to_options()["url"] == (
        "http://localhost:3000/a?tag=a&tag=b"
    )
    assert RequestBuilder(BASE).get("/a").query([("k", "v")]).to_options()["url"] == (
        "http://localhost:3000/a?k=v"
    )


def test_headers_default_to_empty_mapping() -> None:
    assert RequestBuilder(BASE).headers().to_options()["headers"] == {}


def test_optional_settings_are_absent_until_set() -> None:
    jar = object()
    options = (
        RequestBuilder(BASE)
        .get("/image")
        .gzip()
        .timeout(1000)
        .jar(jar)
        .encoding(None)
        .to_options()
    )

    assert options["gzip"] is True
    assert options["timeout"] == 1000
    assert options["jar"] is jar
    assert "encoding" in options and options["encoding"] is None
    assert "json" not in options
    assert "headers" not in options


def test_to_options_is_idempotent() -> None:
    builder = RequestBuilder(BASE).get("/user/:id", {"id": 1}).query({"a": "b"})

    first = builder.to_options()
    second = builder.to_options()

    assert first is second
    assert first["url"] == "http://localhost:3000/user/1?a=b"


def test_configuration_after_finalization_does_not_rebuild_url() -> None:
    builder = RequestBuilder(BASE).get("/one")
    builder.to_options()

    builder.query({"late": "1"})

    assert builder.to_options()["url"] == "http://localhost:3000/one"
