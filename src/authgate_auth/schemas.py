"""Auth schemas and data structures.

These are simple data classes used for transferring identity and
cookie data between the sign-in engine and the application.
"""

from dataclasses import dataclass
from typing import Literal

from starlette.responses import Response

SameSite = Literal["lax", "none"]


@dataclass(frozen=True)
class AuthUser:
    """Minimal identity produced by a provider on successful sign-in.

    Attributes
    ----------
    id
        Opaque user identifier (stringified)
    name
        Display name
    email
        Email address
    image
        Avatar URL, only ever set by OAuth providers
    """

    id: str
    name: str | None = None
    email: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class AccountInfo:
    """Provider metadata handed to the jwt callback on sign-in."""

    provider: str
    type: Literal["credentials", "oauth"]
    provider_account_id: str | None = None


@dataclass(frozen=True)
class OAuthProfile:
    """Normalized user profile returned by an OAuth provider."""

    provider: str
    provider_account_id: str
    email: str | None
    name: str | None = None
    image: str | None = None

    @property
    def account(self) -> AccountInfo:
        return AccountInfo(
            provider=self.provider,
            type="oauth",
            provider_account_id=self.provider_account_id,
        )


@dataclass(frozen=True)
class CookieSpec:
    """Name and attributes of one cookie set by the sign-in engine."""

    name: str
    same_site: SameSite
    secure: bool
    domain: str | None = None
    http_only: bool = True
    path: str = "/"

    def set_on(
        self,
        response: Response,
        value: str,
        max_age: int | None = None,
    ) -> None:
        response.set_cookie(
            key=self.name,
            value=value,
            max_age=max_age,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )

    def delete_from(self, response: Response) -> None:
        # Prefixed cookies are only replaced when the attributes match.
        response.delete_cookie(
            key=self.name,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )


@dataclass(frozen=True)
class CookiePolicy:
    """The full set of cookies the sign-in engine uses."""

    session: CookieSpec
    callback: CookieSpec
    csrf: CookieSpec
    state: CookieSpec
