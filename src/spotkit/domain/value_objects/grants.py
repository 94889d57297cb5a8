"""Authorization grants.

Hey future me - AuthorizationGrant is a TAGGED UNION, not a class hierarchy. Every variant is a
plain frozen dataclass carrying exactly the parameters its OAuth flow needs, and the
Authenticator dispatches on the concrete type with `match`. Adding a flow means adding a
variant here and one `case` there - nothing else has to learn about it.
"""

from dataclasses import dataclass, field
from typing import Literal

from spotkit.domain.value_objects.scopes import SpotifyScope


@dataclass(frozen=True)
class ClientCredentialsGrant:
    """App-only access (no user context, no refresh token)."""

    client_id: str
    client_secret: str = field(repr=False)
    kind: Literal["client_credentials"] = field(default="client_credentials", init=False)


@dataclass(frozen=True)
class AuthorizationCodeGrant:
    """Classic authorization code flow for server-side apps that can keep a secret."""

    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    scopes: tuple[SpotifyScope, ...] = ()
    kind: Literal["authorization_code"] = field(default="authorization_code", init=False)


@dataclass(frozen=True)
class PkceGrant:
    """Authorization code flow with PKCE (no client secret).

    The code_verifier MUST stay private until the code exchange. Don't log it.
    """

    client_id: str
    redirect_uri: str
    code_verifier: str = field(repr=False)
    scopes: tuple[SpotifyScope, ...] = ()
    kind: Literal["pkce"] = field(default="pkce", init=False)


@dataclass(frozen=True)
class ImplicitGrant:
    """Implicit flow. The token arrives in the redirect fragment and can't be refreshed."""

    client_id: str
    redirect_uri: str
    scopes: tuple[SpotifyScope, ...] = ()
    kind: Literal["implicit"] = field(default="implicit", init=False)


AuthorizationGrant = ClientCredentialsGrant | AuthorizationCodeGrant | PkceGrant | ImplicitGrant

__all__ = [
    "AuthorizationCodeGrant",
    "AuthorizationGrant",
    "ClientCredentialsGrant",
    "ImplicitGrant",
    "PkceGrant",
]
