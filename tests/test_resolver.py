"""Token resolver tests — where the token is read from, and in which order."""

import pytest
from starlette.datastructures import Headers

from odyssey.auth.resolver import resolve_token
from odyssey.errors import NoCredential

COOKIE = "odyssey-token"


def test_bearer_header():
    assert resolve_token({"Authorization": "Bearer abc"}, {}, COOKIE) == "abc"


def test_cookie_when_no_header():
    assert resolve_token({}, {COOKIE: "from-cookie"}, COOKIE) == "from-cookie"


def test_header_wins_over_cookie():
    token = resolve_token(
        {"Authorization": "Bearer from-header"}, {COOKIE: "from-cookie"}, COOKIE
    )
    assert token == "from-header"


def test_header_name_is_case_insensitive():
    assert resolve_token({"authorization": "Bearer abc"}, {}, COOKIE) == "abc"
    assert resolve_token(Headers({"AUTHORIZATION": "Bearer abc"}), {}, COOKIE) == "abc"


@pytest.mark.parametrize("value", ["bearer abc", "BEARER abc", "Basic dXNlcjpwdw==", "Bearerabc"])
def test_prefix_is_case_sensitive_and_exact(value):
    with pytest.raises(NoCredential):
        resolve_token({"Authorization": value}, {}, COOKIE)


def test_non_bearer_header_falls_back_to_cookie():
    token = resolve_token(
        {"Authorization": "Basic dXNlcjpwdw=="}, {COOKIE: "from-cookie"}, COOKIE
    )
    assert token == "from-cookie"


def test_other_cookie_names_are_ignored():
    with pytest.raises(NoCredential):
        resolve_token({}, {"auth_token": "x", "Odyssey-Token": "y"}, COOKIE)


def test_cleared_cookie_is_no_credential():
    # After logout the browser may still send the cookie with an empty value.
    with pytest.raises(NoCredential):
        resolve_token({}, {COOKIE: ""}, COOKIE)


def test_empty_bearer_falls_back_to_cookie():
    assert resolve_token({"Authorization": "Bearer "}, {COOKIE: "c"}, COOKIE) == "c"


def test_nothing_sent():
    with pytest.raises(NoCredential):
        resolve_token({}, {}, COOKIE)


def test_does_not_validate():
    # Resolution only extracts; validation is the codec's job.
    assert resolve_token({"Authorization": "Bearer not-a-jwt"}, {}, COOKIE) == "not-a-jwt"
