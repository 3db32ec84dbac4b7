"""
Redirect target validation.

- is_safe_redirect: relative, same-site targets (login "next" parameter)
- is_allowed_external_redirect: absolute URLs restricted to a host allowlist
"""

from typing import Iterable
from urllib.parse import urlsplit

DANGEROUS_URL_PREFIXES = ("/http:", "/https:", "/ftp:", "javascript:", "/javascript:")


def is_safe_redirect(url: str) -> bool:
    """
    Check that a redirect target stays on this site.

    Examples:
        >>> is_safe_redirect("/blogpost/3")
        True
        >>> is_safe_redirect("//evil.com")
        False
        >>> is_safe_redirect("https://evil.com")
        False
    """
    if not url:
        return False

    url = url.strip()
    if not url.startswith("/") or url.startswith("//") or url.startswith("/\\"):
        return False

    lower_url = url.lower()
    return not any(prefix in lower_url for prefix in DANGEROUS_URL_PREFIXES)


def sanitize_redirect(url: str, default: str = "/") -> str:
    return url if is_safe_redirect(url) else default


def is_allowed_external_redirect(url: str, allowed_hosts: Iterable[str]) -> bool:
    """
    Check an absolute http(s) URL against a host allowlist.

    Examples:
        >>> is_allowed_external_redirect("https://speculumx.at/x", ["speculumx.at"])
        True
        >>> is_allowed_external_redirect("https://evil.com", ["speculumx.at"])
        False
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return False

    if parts.scheme not in ("http", "https") or not parts.netloc:
        return False

    return parts.netloc.lower() in {host.lower() for host in allowed_hosts}
