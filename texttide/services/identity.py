# texttide/services/identity.py
# Coarse visitor identity derived from connection metadata.
# Spoofable by design; it gates likes and edits, it does not authenticate.

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from typing import Optional


def client_address(forwarded_for: Optional[str], remote_address: Optional[str]) -> str:
    """Prefer the raw X-Forwarded-For header over the socket peer."""
    return forwarded_for or remote_address or ""


def derive_visitor_id(address: Optional[str], user_agent: Optional[str]) -> str:
    raw = f"{address or ''}-{user_agent or ''}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


class IdentityResolver(ABC):
    """Strategy turning request metadata into a visitor identity."""

    @abstractmethod
    def resolve(self, address: Optional[str], user_agent: Optional[str]) -> str:
        ...


class HeaderIdentityResolver(IdentityResolver):
    def resolve(self, address: Optional[str], user_agent: Optional[str]) -> str:
        return derive_visitor_id(address, user_agent)


class FixedIdentityResolver(IdentityResolver):
    """Always answers with the same identity (tests, single-user tools)."""

    def __init__(self, visitor_id: str):
        self.visitor_id = visitor_id

    def resolve(self, address: Optional[str], user_agent: Optional[str]) -> str:
        return self.visitor_id
