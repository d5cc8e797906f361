"""Cookie naming and attribute rules.

Derives the session, callback, CSRF and OAuth state cookie specifications
from deployment configuration. Pure: no network or store access.

Rules
-----
- HTTPS deployments use the ``__Secure-`` name prefix and ``Secure`` cookies.
- ``SameSite=None`` is used only when the deployment is HTTPS *and* the
  client application lives on a different origin; otherwise ``Lax``.
- The CSRF cookie uses the stricter ``__Host-`` prefix when HTTPS and no
  explicit cookie domain is configured. ``__Host-`` cookies never carry a
  ``Domain`` attribute.
"""

from urllib.parse import urlsplit

from authgate_auth.schemas import CookiePolicy, CookieSpec

SECURE_PREFIX = "__Secure-"
HOST_PREFIX = "__Host-"

SESSION_TOKEN = "session-token"
CALLBACK_URL = "callback-url"
CSRF_TOKEN = "csrf-token"
OAUTH_STATE = "oauth-state"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_origin(value: str | None) -> str | None:
    """Return the ``scheme://host[:port]`` origin of a URL, or None.

    Values without a scheme or host, or with an invalid port, have no origin.
    """
    if not value:
        return None
    try:
        parts = urlsplit(value.strip())
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        return None

    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


def is_secure_url(url: str) -> bool:
    return url.strip().lower().startswith("https://")


def resolve_cookie_policy(
    auth_url: str,
    cors_origin: str | None = None,
    cookie_domain: str | None = None,
) -> CookiePolicy:
    """Derive all cookie specifications for a deployment.

    Parameters
    ----------
    auth_url
        URL under which the auth endpoints are served
    cors_origin
        Origin of the client application, if it is served separately
    cookie_domain
        Explicit ``Domain`` attribute override

    Returns
    -------
    CookiePolicy with session, callback, csrf and state cookie specs
    """
    is_secure = is_secure_url(auth_url)

    auth_origin = parse_origin(auth_url)
    client_origin = parse_origin(cors_origin)
    is_cross_site = (
        auth_origin is not None
        and client_origin is not None
        and auth_origin != client_origin
    )

    same_site = "none" if is_secure and is_cross_site else "lax"
    prefix = SECURE_PREFIX if is_secure else ""
    domain = cookie_domain or None
    use_host_prefix = is_secure and domain is None

    csrf_prefix = HOST_PREFIX if use_host_prefix else prefix

    return CookiePolicy(
        session=CookieSpec(
            name=f"{prefix}{SESSION_TOKEN}",
            same_site=same_site,
            secure=is_secure,
            domain=domain,
        ),
        callback=CookieSpec(
            name=f"{prefix}{CALLBACK_URL}",
            same_site=same_site,
            secure=is_secure,
            domain=domain,
        ),
        csrf=CookieSpec(
            name=f"{csrf_prefix}{CSRF_TOKEN}",
            same_site=same_site,
            secure=is_secure,
            domain=None if use_host_prefix else domain,
        ),
        state=CookieSpec(
            name=f"{prefix}{OAUTH_STATE}",
            same_site=same_site,
            secure=is_secure,
        ),
    )
