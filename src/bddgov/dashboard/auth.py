"""
Bearer-token authentication and role checks for the dashboard API.

Tokens come from ``[[dashboard.tokens]]`` in the config (or
``BDDGOV_DASHBOARD_TOKEN``).  Each token maps to a subject and a role list;
admin endpoints require the configured ``admin_role``.

    401 — no credentials, or a token that matches nothing
    403 — a valid token whose roles lack the admin role
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from fastapi import Request

from bddgov.core.config import ApiToken


@dataclass(frozen=True)
class Principal:
    subject: str
    roles: frozenset[str] = field(default_factory=frozenset)


class TokenAuthenticator:
    """Resolve ``Authorization: Bearer <token>`` headers to principals."""

    def __init__(self, tokens: list[ApiToken]) -> None:
        self._tokens = list(tokens)

    def authenticate(self, authorization: str | None) -> Principal | None:
        if not authorization:
            return None
        scheme, _, credential = authorization.partition(" ")
        credential = credential.strip()
        if scheme.lower() != "bearer" or not credential:
            return None

        matched: ApiToken | None = None
        # No early exit: every configured token is compared
        for candidate in self._tokens:
            if secrets.compare_digest(
                candidate.token.get_secret_value().encode(), credential.encode()
            ):
                matched = candidate
        if matched is None:
            return None
        return Principal(subject=matched.subject, roles=frozenset(matched.roles))


def get_principal(request: Request) -> Principal | None:
    """FastAPI dependency: the authenticated principal, or None."""
    authenticator: TokenAuthenticator = request.app.state.authenticator
    return authenticator.authenticate(request.headers.get("authorization"))
