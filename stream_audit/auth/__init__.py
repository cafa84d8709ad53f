"""Authentication submodule – app-only access tokens for Microsoft Graph."""

from .token import TokenAuthenticator

__all__ = ["TokenAuthenticator"]
