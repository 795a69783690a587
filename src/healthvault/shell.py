"""
Shell Redirect URL Builder

Responsibilities:
- Build the URL that sends a user to the Shell web site
- Fold application id, return URL, signup code and flags into the target
  query string
- Carry action level parameters through as a nested query string

The builder is pure: it reads only its own fields and the settings object
passed to construct_redirect_url().
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional
from uuid import UUID

from .config import HealthVaultSettings
from .exceptions import ArgumentError, ConfigurationError
from .utils import to_query_string

SHELL_REDIRECT_PAGE = "/redirect.aspx"


def _combine_query_strings(query: Optional[str], parameters: Dict[str, str]) -> str:
    if query and query.startswith("?"):
        query = query[1:]
    if not parameters:
        return query or ""

    encoded = to_query_string(parameters.items())
    if not query:
        return encoded
    return f"{query}&{encoded}"


@dataclass
class ShellRedirectParameters:
    """
    Parameters of a Shell redirect.

    Usage:
        params = ShellRedirectParameters(
            target_location="AppAuth",
            application_id=app_id,
            return_url="https://app.example/x",
        )
        url = params.construct_redirect_url(settings)

    Attributes:
        shell_redirector_url: Base Shell URL; settings.shell_url when unset
        target_location: Shell page to open (e.g. "AppAuth"); mandatory
        target_parameters: Extra target level parameters
        target_query_string: Pre-encoded target level query string
        action_parameters: Parameters passed back to the application
        action_query_string: Pre-encoded action level query string
        application_id: Sent as "appid"
        return_url: Sent as "redirect"
        signup_code: Sent as "signupcode"
        is_multi_record_application: Sent as "ismra" when true
        allow_instance_bounce: Sent as "aib" when true
        token_redirection_method: Sent as "trm"
    """

    shell_redirector_url: Optional[str] = None
    target_location: Optional[str] = None
    target_parameters: Dict[str, str] = field(default_factory=dict)
    target_query_string: Optional[str] = None
    action_parameters: Dict[str, str] = field(default_factory=dict)
    action_query_string: Optional[str] = None
    application_id: Optional[UUID] = None
    return_url: Optional[str] = None
    signup_code: Optional[str] = None
    is_multi_record_application: Optional[bool] = None
    allow_instance_bounce: Optional[bool] = None
    token_redirection_method: Optional[str] = None

    def clone(self) -> 'ShellRedirectParameters':
        """Copy with independent parameter dictionaries."""
        return replace(
            self,
            target_parameters=dict(self.target_parameters),
            action_parameters=dict(self.action_parameters),
        )

    def construct_redirect_url(self, settings: Optional[HealthVaultSettings] = None) -> str:
        """
        Build the full redirect URL.

        Args:
            settings: Supplies shell_url when shell_redirector_url is unset

        Raises:
            ArgumentError: If target_location is not set
            ConfigurationError: If no Shell URL is available
        """
        base_url = self.shell_redirector_url
        if not base_url:
            if settings is None or not settings.shell_url:
                raise ConfigurationError("A Shell URL is required to build a redirect URL")
            base_url = settings.shell_url

        if not base_url.lower().endswith(SHELL_REDIRECT_PAGE):
            if base_url.endswith("/"):
                base_url += SHELL_REDIRECT_PAGE[1:]
            else:
                base_url += SHELL_REDIRECT_PAGE

        return f"{base_url}?{self.construct_redirector_query_string()}"

    def construct_redirector_query_string(self) -> str:
        """
        Build "target=...&targetqs=..." for the redirect page.

        Raises:
            ArgumentError: If target_location is not set
        """
        if not self.target_location:
            raise ArgumentError("target_location is required for a Shell redirect")

        parameters = [("target", self.target_location)]
        target_query_string = self.construct_target_query_string()
        if target_query_string:
            parameters.append(("targetqs", "?" + target_query_string))
        return to_query_string(parameters)

    def construct_target_query_string(self) -> str:
        """The target level query string, without a leading '?'."""
        return _combine_query_strings(self.target_query_string, self._flatten_target_parameters())

    def _flatten_target_parameters(self) -> Dict[str, str]:
        parameters = dict(self.target_parameters)

        if self.application_id is not None:
            parameters["appid"] = str(self.application_id)
        if self.return_url:
            parameters["redirect"] = self.return_url
        if self.signup_code:
            parameters["signupcode"] = self.signup_code

        action_query_string = _combine_query_strings(self.action_query_string, self.action_parameters)
        if action_query_string:
            parameters["actionqs"] = action_query_string

        if self.is_multi_record_application:
            parameters["ismra"] = "true"
        if self.allow_instance_bounce:
            parameters["aib"] = "true"
        if self.token_redirection_method:
            parameters["trm"] = self.token_redirection_method
        return parameters
