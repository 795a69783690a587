"""Tests for the Shell redirect URL builder."""

from urllib.parse import parse_qs, urlsplit
from uuid import UUID

import pytest

from healthvault.config import HealthVaultSettings
from healthvault.exceptions import ArgumentError, ConfigurationError
from healthvault.shell import ShellRedirectParameters

APP_ID = UUID("2c7e5e0c-8f3a-4a52-9d61-0e8f3f1b2a44")


def _targetqs(url: str) -> str:
    return parse_qs(urlsplit(url).query)["targetqs"][0]


def test_app_auth_url():
    params = ShellRedirectParameters(
        shell_redirector_url="https://account.test",
        target_location="AppAuth",
        application_id=APP_ID,
        return_url="https://app.example/x",
    )

    url = params.construct_redirect_url()

    assert url.startswith("https://account.test/redirect.aspx?target=AppAuth&targetqs=")
    assert _targetqs(url) == f"?appid={APP_ID}&redirect=https%3a%2f%2fapp.example%2fx"


def test_targetqs_is_encoded_in_the_url():
    params = ShellRedirectParameters(
        shell_redirector_url="https://account.test/",
        target_location="AppAuth",
        application_id=APP_ID,
    )

    query = params.construct_redirector_query_string()

    assert query == f"target=AppAuth&targetqs=%3fappid%3d{APP_ID}"


def test_missing_target_raises_argument_error():
    params = ShellRedirectParameters(shell_redirector_url="https://account.test/")

    with pytest.raises(ArgumentError):
        params.construct_redirect_url()


def test_missing_shell_url_raises_configuration_error():
    params = ShellRedirectParameters(target_location="AppAuth")

    with pytest.raises(ConfigurationError):
        params.construct_redirect_url()
    with pytest.raises(ConfigurationError):
        params.construct_redirect_url(HealthVaultSettings(shell_url=None))


def test_shell_url_from_settings():
    params = ShellRedirectParameters(target_location="AppAuth")

    url = params.construct_redirect_url(HealthVaultSettings(shell_url="https://account.test/"))

    assert url == "https://account.test/redirect.aspx?target=AppAuth"


@pytest.mark.parametrize(
    "base_url",
    [
        "https://account.test",
        "https://account.test/",
        "https://account.test/redirect.aspx",
        "https://account.test/REDIRECT.ASPX",
    ],
)
def test_redirect_page_appended_once(base_url):
    url = ShellRedirectParameters(shell_redirector_url=base_url, target_location="Home").construct_redirect_url()

    path = urlsplit(url).path
    assert path.lower() == "/redirect.aspx"
    assert "//redirect" not in url.lower()


def test_all_target_keys_and_nested_action_query_string():
    params = ShellRedirectParameters(
        shell_redirector_url="https://account.test/",
        target_location="AppAuth",
        target_parameters={"extra": "a b"},
        action_parameters={"state": "x&y"},
        action_query_string="?first=1",
        application_id=APP_ID,
        return_url="https://app.example/x",
        signup_code="CODE",
        is_multi_record_application=True,
        allow_instance_bounce=True,
        token_redirection_method="post",
    )

    target = params.construct_target_query_string()

    assert target == (
        f"extra=a+b&appid={APP_ID}&redirect=https%3a%2f%2fapp.example%2fx&signupcode=CODE"
        "&actionqs=first%3d1%26state%3dx%2526y&ismra=true&aib=true&trm=post"
    )


def test_action_parameters_alone_produce_actionqs():
    params = ShellRedirectParameters(target_location="AppAuth", action_parameters={"state": "1"})

    assert params.construct_target_query_string() == "actionqs=state%3d1"


def test_false_flags_are_omitted_and_target_query_string_is_kept():
    params = ShellRedirectParameters(
        target_location="AppAuth",
        target_query_string="?preset=1",
        is_multi_record_application=False,
        allow_instance_bounce=False,
    )

    assert params.construct_target_query_string() == "preset=1"


def test_clone_is_independent():
    params = ShellRedirectParameters(target_location="AppAuth", target_parameters={"a": "1"})

    copy = params.clone()
    copy.target_parameters["b"] = "2"
    copy.target_location = "Other"

    assert params.target_parameters == {"a": "1"}
    assert params.target_location == "AppAuth"
    assert copy == ShellRedirectParameters(target_location="Other", target_parameters={"a": "1", "b": "2"})
