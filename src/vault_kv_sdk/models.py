"""
Data models for Vault KV SDK.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class VaultResponse(BaseModel):
    """Envelope shared by every Vault API response."""
    model_config = ConfigDict(extra="ignore")

    request_id: Optional[str] = Field(None, description="Request identifier")
    lease_id: Optional[str] = Field(None, description="Lease identifier")
    renewable: bool = Field(False, description="Whether the lease is renewable")
    lease_duration: int = Field(0, description="Lease duration in seconds")
    data: Optional[Dict[str, Any]] = Field(None, description="Response payload")
    wrap_info: Optional[Dict[str, Any]] = Field(None, description="Response wrapping info")
    warnings: Optional[List[str]] = Field(None, description="Warnings raised by the store")
    auth: Optional[Dict[str, Any]] = Field(None, description="Auth block")


class VersionMetadata(BaseModel):
    """Metadata of a single secret version."""
    model_config = ConfigDict(extra="ignore")

    version: Optional[int] = Field(None, description="Version number")
    created_time: Optional[str] = Field(None, description="Creation timestamp")
    deletion_time: Optional[str] = Field(None, description="Soft deletion timestamp, empty if live")
    destroyed: bool = Field(False, description="Whether the version was destroyed")
    custom_metadata: Optional[Dict[str, str]] = Field(None, description="User supplied metadata")

    @property
    def deleted(self) -> bool:
        return bool(self.deletion_time)


class WriteResult(VersionMetadata):
    """Result of a write: the metadata of the version just created."""
    pass


class ReadResult(BaseModel):
    """Secret fields plus the metadata of the version that was read."""
    model_config = ConfigDict(extra="forbid")

    data: Dict[str, JsonValue] = Field(default_factory=dict, description="Secret fields")
    metadata: Optional[VersionMetadata] = Field(None, description="Version metadata")

    @property
    def version(self) -> Optional[int]:
        return self.metadata.version if self.metadata else None

    @classmethod
    def from_response_data(cls, data: Optional[Dict[str, Any]]) -> "ReadResult":
        """Unwrap ``data.data`` for versioned mounts, or take ``data`` as is."""
        data = data or {}
        if "data" in data and "metadata" in data:
            return cls(
                data=data["data"] or {},
                metadata=VersionMetadata.model_validate(data["metadata"] or {}),
            )
        return cls(data=data)


class ListResult(BaseModel):
    """Immediate children of a path; sub-collections end with ``/``."""
    model_config = ConfigDict(extra="ignore")

    keys: List[str] = Field(default_factory=list, description="Child key names")

    def __contains__(self, key: object) -> bool:
        return key in self.keys
