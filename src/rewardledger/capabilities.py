"""
Capability Credentials

Explicit credentials passed into privileged ledger operations.

Capabilities follow the format: scope:role
Examples:
- ledger:admin
- ledger:registry
- ledger:*

A credential is only honored when its holder is the identity the ledger
expects for that role; holding the capability string alone is not enough.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rewardledger.exceptions import AuthorizationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Credential(BaseModel):
    """A set of capabilities held by one identity."""

    credential_id: str = Field(default_factory=lambda: f"cred_{uuid.uuid4().hex[:12]}")
    holder: str = Field(..., description="Identity presenting the credential")
    capabilities: list[str] = Field(default_factory=list)

    issued_at: datetime = Field(default_factory=_utcnow)
    expires_at: Optional[datetime] = None
    active: bool = True

    @field_validator("holder")
    @classmethod
    def validate_holder(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Credential holder must not be empty")
        return v

    @field_validator("capabilities")
    @classmethod
    def validate_capabilities(cls, v: list[str]) -> list[str]:
        for capability in v:
            if capability != "*" and ":" not in capability:
                raise ValueError(f"Invalid capability format: {capability}")
        return v

    @classmethod
    def create(
        cls,
        holder: str,
        capabilities: Optional[list[str]] = None,
        expires_at: Optional[datetime] = None,
    ) -> "Credential":
        return cls(holder=holder, capabilities=capabilities or [], expires_at=expires_at)

    @classmethod
    def participant(cls, holder: str) -> "Credential":
        """Credential with no capabilities, identifying a plain participant."""
        return cls(holder=holder)

    def is_valid(self) -> bool:
        """Check if the credential is active and not expired."""
        if not self.active:
            return False
        if self.expires_at and _utcnow() > self.expires_at:
            return False
        return True

    def grants(self, requested: str) -> bool:
        """Check whether any held capability covers *requested*."""
        if not self.is_valid():
            return False
        for capability in self.capabilities:
            if capability == "*" or capability == requested:
                return True
            if capability.endswith(":*") and requested.startswith(capability[:-1]):
                return True
        return False

    def revoke(self) -> None:
        self.active = False


def require(credential: Credential, capability: str, expected_holder: Optional[str]) -> None:
    """Reject *credential* unless it holds *capability* for *expected_holder*.

    Raises:
        AuthorizationError: If the holder differs, the credential is no
            longer valid, or the capability is missing.
    """
    if expected_holder is None or credential.holder != expected_holder:
        raise AuthorizationError(
            f"'{credential.holder}' is not authorized for {capability}"
        )
    if not credential.grants(capability):
        raise AuthorizationError(
            f"Credential {credential.credential_id} does not grant {capability}"
        )
