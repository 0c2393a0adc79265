"""Data models for the dobject SDK."""

import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ObjectMetadata(BaseModel):
    """Server-maintained metadata of a digital object."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    created_on: Optional[datetime] = Field(None, alias="createdOn", description="Creation time")
    created_by: Optional[str] = Field(None, alias="createdBy", description="Creating principal ID")
    modified_on: Optional[datetime] = Field(
        None, alias="modifiedOn", description="Last modification time"
    )
    modified_by: Optional[str] = Field(
        None, alias="modifiedBy", description="Last modifying principal ID"
    )
    txn_id: Optional[int] = Field(None, alias="txnId", description="Transaction identifier")


class PayloadInfo(BaseModel):
    """Descriptor of a payload stored with an object."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., description="Payload name")
    filename: Optional[str] = Field(None, description="Stored file name")
    media_type: Optional[str] = Field(None, alias="mediaType", description="Declared MIME type")
    size: Optional[int] = Field(None, description="Size in bytes")


class AccessControlList(BaseModel):
    """Reader and writer principal IDs of an object."""

    model_config = ConfigDict(populate_by_name=True)

    readers: List[str] = Field(default_factory=list, description="Reader principal IDs")
    writers: List[str] = Field(default_factory=list, description="Writer principal IDs")
    payload_readers: Optional[List[str]] = Field(
        None, alias="payloadReaders", description="Payload reader principal IDs"
    )

    def to_wire(self) -> Dict[str, List[str]]:
        """Return the ACL as the server expects it in an ``acl`` field."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenInfo(BaseModel):
    """Properties of an access token as reported by introspection."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    active: bool = Field(..., description="Whether the token is still valid")
    username: Optional[str] = Field(None, description="Principal name")
    user_id: Optional[str] = Field(None, alias="userId", description="Principal ID")


class SearchResponse(BaseModel):
    """One page of search results."""

    model_config = ConfigDict(populate_by_name=True)

    page_num: int = Field(0, alias="pageNum", description="Zero-based page number")
    page_size: int = Field(0, alias="pageSize", description="Requested page size")
    size: int = Field(0, description="Total number of hits")
    results: List[Any] = Field(default_factory=list, description="Records or IDs")


class ConnectionConfig(BaseModel):
    """Bootstrap settings for a connection, usually read from a JSON file."""

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(..., description="Base URL of the server")
    username: str = Field(..., description="Principal to log in as")
    password: Optional[str] = Field(None, description="Password; prompted for when absent")
    verify: bool = Field(True, description="Whether to verify TLS certificates")

    @classmethod
    def from_file(cls, path: Union[str, "os.PathLike[str]"]) -> "ConnectionConfig":
        """Load a configuration file.

        Args:
            path: Path to a JSON file with ``host``, ``username`` and ``password``

        Returns:
            ConnectionConfig
        """
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
