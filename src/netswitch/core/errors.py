from __future__ import annotations


class SwitcherError(Exception):
    """Base error. ``message`` is already localized for the end user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailed(SwitcherError):
    """Missing or invalid anti-forgery token."""


class AuthorizationDenied(SwitcherError):
    pass


class NotFound(SwitcherError):
    pass


class EnvironmentUnsupported(SwitcherError):
    """Host is not multi-network or too old. Raised at activation only."""

    def __init__(self, message: str, title: str = "Plugin Activation Error") -> None:
        super().__init__(message)
        self.title = title
