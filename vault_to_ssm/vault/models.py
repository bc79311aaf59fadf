"""Pydantic models for the Vault side of the migration.

This module defines the connection configuration and the mount model used
throughout discovery and the tree walk.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PATH_SEPARATOR = "/"


class KVVersion(str, Enum):
    """Protocol variant of a KV secrets engine mount."""

    V1 = "v1"
    V2 = "v2"


class Mount(BaseModel):
    """A secrets engine mount and the protocol used to walk it."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        description="Mount path, always ending with a single separator",
        examples=["secret/"],
    )
    variant: KVVersion = Field(
        ...,
        description="Protocol variant used for listing and reading",
    )
    engine_type: Optional[str] = Field(
        default=None,
        description="Declared engine type (generic, kv)",
    )
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Declared engine options",
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize the mount path to 'name/'."""
        stripped = v.strip().strip(PATH_SEPARATOR)
        if not stripped:
            raise ValueError("Mount path cannot be empty")
        if " " in stripped:
            raise ValueError("Mount path cannot contain spaces")
        return stripped + PATH_SEPARATOR

    @property
    def mount_point(self) -> str:
        """Mount path without the trailing separator, as hvac expects it."""
        return self.path.rstrip(PATH_SEPARATOR)


class VaultConnectionConfig(BaseModel):
    """Configuration for Vault client connections."""

    vault_addr: str = Field(
        ...,
        description="Vault server address (https://...)",
        examples=["https://vault.example.com:8200"],
    )
    auth_method: str = Field(
        default="token",
        description="Authentication method",
        examples=["token"],
    )
    role_id: Optional[str] = Field(
        default=None,
        description="AppRole role ID (if approle)",
    )
    secret_id: Optional[str] = Field(
        default=None,
        description="AppRole secret ID (if approle)",
    )
    token: Optional[str] = Field(
        default=None,
        description="Vault token (if token auth)",
    )
    kubernetes_role: Optional[str] = Field(
        default=None,
        description="Vault role bound to the service account (if kubernetes)",
    )
    namespace: Optional[str] = Field(
        default=None,
        description="Enterprise namespace",
    )
    timeout: int = Field(
        default=30,
        description="Request timeout in seconds",
        ge=1,
        le=300,
    )
    retries: int = Field(
        default=3,
        description="Attempts per request for transient failures",
        ge=1,
        le=10,
    )
    verify: bool = Field(
        default=True,
        description="Verify TLS certificates",
    )

    @field_validator("vault_addr")
    @classmethod
    def validate_vault_addr(cls, v: str) -> str:
        """Validate Vault address format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("vault_addr must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("auth_method")
    @classmethod
    def validate_auth_method(cls, v: str) -> str:
        """Validate authentication method."""
        valid = {"approle", "token", "kubernetes"}
        if v not in valid:
            raise ValueError(f"Invalid auth_method: {v}. Must be one of {sorted(valid)}")
        return v

    def has_credentials(self) -> bool:
        """Check the configuration carries credentials for its auth method."""
        if self.auth_method == "approle":
            return bool(self.role_id and self.secret_id)
        elif self.auth_method == "token":
            return bool(self.token)
        return True  # kubernetes uses the mounted service account token
