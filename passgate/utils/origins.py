"""Origin matching for redirect targets and WebAuthn client data.

An origin is the (scheme, host, port) triple of an absolute http(s) URL, with
the scheme's default port filled in. Configured origins may carry a leading
``*.`` label (``https://*.example.com``), which admits any strict subdomain of
the host but not the host itself.
"""
import logging
import re
from typing import Iterable, NamedTuple, Optional
from urllib.parse import urlsplit

from flask import current_app

from passgate.exceptions.auth_exceptions import ForbiddenRedirectError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}

WILDCARD_PREFIX = "*."

HOST_PATTERN = re.compile(r"^[A-Za-z0-9_.:-]+$")


class Origin(NamedTuple):
    """Scheme, host and port of a URL."""

    scheme: str
    host: str
    port: int


def _is_unambiguous(url) -> bool:
    # Browsers read "\" as "/" and drop tabs and newlines, so such URLs can
    # resolve to a different host than urlsplit reports
    return not any(char == "\\" or char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F for char in url)


def parse_origin(url) -> Optional[Origin]:
    """Extract the origin of an absolute http(s) URL.

    URLs carrying credentials (``user@host``), backslashes, whitespace or
    control characters are refused.

    Returns:
        Origin, or None if the value is not an unambiguous absolute http(s) URL
    """
    if not isinstance(url, str) or not url or not _is_unambiguous(url):
        return None
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS or not parts.hostname:
        return None
    if parts.username is not None or parts.password is not None:
        return None
    if not HOST_PATTERN.match(parts.hostname):
        return None
    return Origin(scheme, parts.hostname.lower(), port or DEFAULT_PORTS[scheme])


class AllowedOrigin(NamedTuple):
    """A configured origin entry."""

    origin: Origin
    wildcard: bool

    @classmethod
    def parse(cls, value):
        """Parse a configured origin such as ``https://*.example.com:8443``.

        Raises:
            ValueError: If the value is not an http(s) origin
        """
        wildcard = False
        candidate = value.strip()
        scheme, sep, rest = candidate.partition("://")
        if sep and rest.startswith(WILDCARD_PREFIX):
            wildcard = True
            candidate = f"{scheme}://{rest[len(WILDCARD_PREFIX):]}"

        origin = parse_origin(candidate)
        if origin is None:
            raise ValueError(f"Invalid allowed origin: {value!r}")
        return cls(origin, wildcard)

    def matches(self, origin: Origin, allow_subdomains=False) -> bool:
        """Check whether an origin is admitted by this entry."""
        if origin.scheme != self.origin.scheme or origin.port != self.origin.port:
            return False
        if not self.wildcard and origin.host == self.origin.host:
            return True
        if self.wildcard or allow_subdomains:
            return origin.host.endswith("." + self.origin.host)
        return False


class AllowedOrigins:
    """The set of origins the relying party accepts."""

    def __init__(self, origins: Iterable[str], allow_subdomains=False):
        self.entries = [AllowedOrigin.parse(value) for value in origins]
        self.allow_subdomains = allow_subdomains

    @classmethod
    def from_config(cls, config):
        """Build the allowed origins from the relying party configuration."""
        origins = [config["WEBAUTHN_RP_ORIGIN"]]
        origins.extend(config.get("WEBAUTHN_EXTRA_ALLOWED_ORIGINS") or [])
        return cls(origins, allow_subdomains=config.get("WEBAUTHN_ALLOW_SUBDOMAINS", False))

    def allows(self, url) -> bool:
        """Check whether the origin of ``url`` is allowed."""
        origin = parse_origin(url)
        if origin is None:
            return False
        return any(entry.matches(origin, self.allow_subdomains) for entry in self.entries)

    def __contains__(self, url):
        return self.allows(url)

    def __repr__(self):
        return f"<AllowedOrigins entries={len(self.entries)} allow_subdomains={self.allow_subdomains}>"


def get_allowed_origins() -> AllowedOrigins:
    """Get the allowed origins configured on the current application."""
    return current_app.extensions["passgate.allowed_origins"]


def validate_redirect(candidate_url, allowed_origins=None) -> str:
    """
    Validate a post-login redirect target.

    Args:
        candidate_url: URL supplied by the client
        allowed_origins: AllowedOrigins, or an iterable of origin strings;
            defaults to the current application's origins

    Returns:
        The validated URL

    Raises:
        ForbiddenRedirectError: If the URL is not absolute or its origin is not allowed
    """
    if allowed_origins is None:
        allowed_origins = get_allowed_origins()
    elif not isinstance(allowed_origins, AllowedOrigins):
        allowed_origins = AllowedOrigins(allowed_origins)

    if not allowed_origins.allows(candidate_url):
        logger.info(f"Denied client request for redirect to {candidate_url!r}")
        raise ForbiddenRedirectError()

    return candidate_url
