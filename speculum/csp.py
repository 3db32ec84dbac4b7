"""
Content-Security-Policy handling.

A policy header is parsed into an ordered mapping of directive name to an
ordered, duplicate free list of sources, modified through explicit methods
and serialized back at the response boundary.

Directive names are matched case-insensitively and serialized as written.
Duplicate directives: only the first occurrence of a directive is kept.
Browsers ignore later duplicates as well, so the serialized header enforces
exactly what the incoming one did.
"""

import base64
import logging
import secrets
from typing import Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

CSP_HEADER = "Content-Security-Policy"
NONCE_BYTES = 16

SCRIPT_SRC = "script-src"
STYLE_SRC = "style-src"
UNSAFE_HASHES = "'unsafe-hashes'"


def generate_nonce() -> str:
    """Return 16 random bytes, base64 encoded."""
    return base64.b64encode(secrets.token_bytes(NONCE_BYTES)).decode("ascii")


def nonce_source(nonce: str) -> str:
    return f"'nonce-{nonce}'"


class ContentSecurityPolicy:
    """Ordered set of CSP directives."""

    def __init__(self, directives: Optional[Mapping[str, Iterable[str]]] = None):
        # lower-cased name -> sources; spelling as written kept in _names
        self._directives: Dict[str, List[str]] = {}
        self._names: Dict[str, str] = {}
        for name, sources in (directives or {}).items():
            self._add_directive(name, sources)

    @classmethod
    def parse(cls, header: str) -> "ContentSecurityPolicy":
        policy = cls()
        for clause in header.split(";"):
            tokens = clause.split()
            if not tokens:
                continue
            name = tokens[0]
            if policy.has_directive(name):
                logger.debug(f"Ignoring duplicate CSP directive: {name}")
                continue
            policy._add_directive(name, tokens[1:])
        return policy

    @classmethod
    def from_directives(
        cls, directives: Mapping[str, Iterable[str]]
    ) -> "ContentSecurityPolicy":
        return cls(directives)

    def _add_directive(self, name: str, sources: Iterable[str]) -> None:
        deduped: List[str] = []
        for source in sources:
            if source not in deduped:
                deduped.append(source)
        key = name.lower()
        self._directives[key] = deduped
        self._names.setdefault(key, name)

    def has_directive(self, name: str) -> bool:
        return name.lower() in self._directives

    def sources(self, name: str) -> List[str]:
        return list(self._directives.get(name.lower(), []))

    @property
    def directive_names(self) -> List[str]:
        return [self._names[key] for key in self._directives]

    def append_sources(self, name: str, *sources: str) -> bool:
        """
        Append sources to an existing directive.

        Sources already present are skipped. A missing directive is not
        created; the call returns False and the policy stays unchanged.
        """
        current = self._directives.get(name.lower())
        if current is None:
            return False
        for source in sources:
            if source not in current:
                current.append(source)
        return True

    def serialize(self) -> str:
        return "; ".join(
            " ".join([self._names[key], *sources])
            for key, sources in self._directives.items()
        )

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"<ContentSecurityPolicy {self.serialize()!r}>"


def apply_nonce(
    header: str,
    nonce: str,
    script_hashes: Iterable[str] = (),
    style_hashes: Iterable[str] = (),
) -> str:
    """
    Authorize inline elements carrying ``nonce`` in an existing policy header.

    script-src gets the nonce, style-src gets the nonce and 'unsafe-hashes'.
    Known hashes are appended after the nonce. Directives that are absent
    are not added.
    """
    policy = ContentSecurityPolicy.parse(header)
    token = nonce_source(nonce)
    policy.append_sources(SCRIPT_SRC, token, *script_hashes)
    policy.append_sources(STYLE_SRC, token, UNSAFE_HASHES, *style_hashes)
    return policy.serialize()
