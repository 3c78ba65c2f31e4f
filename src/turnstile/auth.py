"""Permissions, permits and the authorizer interface.

Turning credentials into a permission set is delegated to an
``Authorizer``. The router only ever sees the resulting ``Permit``.

Usage::

    from turnstile.auth import Permission, Permit, StaticAuthorizer

    authorizer = StaticAuthorizer({
        "s3cr3t": Permit("curator", frozenset({Permission.INDEX_EDIT})),
    })
    permit = authorizer.verify("Bearer s3cr3t")
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from typing import Protocol, runtime_checkable

from turnstile.errors import ResponseError
from turnstile.http.response import unauthorized

_log = logging.getLogger("turnstile.auth")

ANONYMOUS = "anonymous"


class Permission(StrEnum):
    """Built-in permissions of an index service.

    Routes may require any hashable permission value: members of this
    enum, members of an application-defined enum, or plain strings.
    """

    RULES_EDIT = auto()
    INDEX_EDIT = auto()


def permission_name(permission: Hashable) -> str:
    """Lower-cased display name used in 403 messages."""
    if isinstance(permission, Enum):
        return permission.name.lower()
    return str(permission).lower()


@dataclass(frozen=True, slots=True)
class Permit:
    """Resolved identity and granted permissions for one request."""

    username: str
    permissions: frozenset[Hashable] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls, permissions: Iterable[Hashable] = ()) -> Permit:
        return cls(ANONYMOUS, frozenset(permissions))

    def allows(self, permission: Hashable) -> bool:
        return permission in self.permissions


@runtime_checkable
class Authorizer(Protocol):
    """Turns the raw ``Authorization`` header into a ``Permit``.

    Called with the empty string when the header is absent. May raise
    ``ResponseError`` to reject the request outright (e.g. 401).
    """

    def verify(self, authorization: str) -> Permit: ...


@dataclass(frozen=True, slots=True)
class NoneAuthorizer:
    """Authentication disabled: everyone is ``anonymous`` with every permission."""

    permissions: frozenset[Hashable] = frozenset(Permission)

    def verify(self, authorization: str) -> Permit:  # noqa: ARG002
        return Permit.anonymous(self.permissions)


class StaticAuthorizer:
    """Bearer-token authorizer backed by a fixed token table.

    A missing header yields an anonymous permit with *anonymous_permissions*
    (none by default). An unknown token or another scheme is rejected
    with 401. Token comparison is constant-time.
    """

    __slots__ = ("_anonymous", "_tokens")

    def __init__(
        self,
        tokens: Mapping[str, Permit],
        *,
        anonymous_permissions: Iterable[Hashable] = (),
    ) -> None:
        self._tokens = tuple((token.encode("utf-8"), permit) for token, permit in tokens.items())
        self._anonymous = Permit.anonymous(anonymous_permissions)

    def verify(self, authorization: str) -> Permit:
        if not authorization:
            return self._anonymous

        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() != "bearer" or not credentials:
            _log.debug("Rejected authorization scheme %r", scheme)
            raise ResponseError(unauthorized("Unsupported authorization scheme\n"))

        presented = credentials.strip().encode("utf-8")
        found: Permit | None = None
        for token, permit in self._tokens:
            # Compare against every entry so timing does not reveal the match position
            if hmac.compare_digest(token, presented):
                found = permit
        if found is None:
            _log.debug("Rejected unknown bearer token")
            raise ResponseError(unauthorized())
        return found
