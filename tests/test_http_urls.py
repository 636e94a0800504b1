from urllib.parse import urlsplit

import pytest

from webservice.common.errors import ErrorKind, InvalidURLError, Severity
from webservice.http.urls import is_absolute, parse_base_url, resolve


def test_resolve_relative_path_against_base():
    assert resolve("https://api.example.com/v1/", "users/42") == "https://api.example.com/v1/users/42"


def test_resolve_absolute_path_without_base_is_unchanged():
    assert resolve(None, "https://other.example.com/x") == "https://other.example.com/x"


def test_resolve_absolute_path_overrides_base():
    assert resolve("https://api.example.com/v1/", "https://other.example.com/x") == "https://other.example.com/x"


def test_resolve_empty_path_returns_base_exactly():
    assert resolve("https://api.example.com", "") == "https://api.example.com"


def test_resolve_empty_path_without_base_is_empty_string():
    assert resolve(None, "") == ""


def test_resolve_follows_relative_resolution_rules():
    # No trailing slash on the base: the last segment is replaced.
    assert resolve("https://api.example.com/v1", "users") == "https://api.example.com/users"
    assert resolve("https://api.example.com/v1/", "/root") == "https://api.example.com/root"
    assert resolve("https://api.example.com/v1/", "users?page=2") == "https://api.example.com/v1/users?page=2"


def test_resolve_is_pure():
    first = resolve("https://api.example.com/v1/", "users/42")
    second = resolve("https://api.example.com/v1/", "users/42")
    assert first == second


def test_resolve_relative_path_without_base_is_rejected():
    with pytest.raises(InvalidURLError) as err:
        resolve(None, "users/42")
    assert err.value.severity is Severity.ABORT
    assert err.value.kind is ErrorKind.URL


@pytest.mark.parametrize("path", ["users/4 2", "http://[::1", "bad<path>"])
def test_resolve_malformed_path_is_rejected(path):
    with pytest.raises(InvalidURLError):
        resolve("https://api.example.com/", path)


def test_parse_base_url_accepts_absolute_strings():
    assert parse_base_url("https://api.example.com") == "https://api.example.com"


@pytest.mark.parametrize("value", ["", "not a url", "relative/path", "http://host:notaport/", None])
def test_parse_base_url_invalid_values_become_none(value):
    assert parse_base_url(value) is None


def test_parse_base_url_accepts_structured_values():
    assert parse_base_url(urlsplit("https://api.example.com/v1/")) == "https://api.example.com/v1/"


def test_is_absolute():
    assert is_absolute("https://api.example.com/x")
    assert not is_absolute("/x")


def test_resolve_relative_path_against_unregistered_scheme():
    base = parse_base_url("http+unix://%2Fvar%2Frun%2Fapi.sock/v1/")

    assert resolve(base, "users/42") == "http+unix://%2Fvar%2Frun%2Fapi.sock/v1/users/42"
    assert resolve(base, "../health") == "http+unix://%2Fvar%2Frun%2Fapi.sock/health"
    assert resolve(base, "/root?x=1") == "http+unix://%2Fvar%2Frun%2Fapi.sock/root?x=1"


def test_resolve_absolute_path_against_unregistered_scheme_is_unchanged():
    assert resolve("custom://host/base/", "https://other.example.com/x") == "https://other.example.com/x"
