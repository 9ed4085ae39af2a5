"""Caller-supplied configuration shared by every verb."""

from enum import Enum
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from webrequest.core.certificate import CertificateValidator


class MaterializationMode(str, Enum):
    """How the response body is materialized on success."""

    LAZY = "lazy"
    TEXT = "text"
    BINARY = "binary"
    BOTH = "both"


class RequestOptions(BaseModel):
    """Options applied by the response processor to every request.

    Attributes:
        headers: Request headers, applied case-insensitively; the last value wins
            for a repeated name.
        timeout_seconds: Request timeout. Only applied when greater than zero,
            otherwise the transport default is used.
        certificate_validator: Overrides default trust verification for this request.
        dispose_validator_after_use: Dispose the certificate validator when the
            request's resources are released. Leave False to reuse the validator.
        materialization: Which response body fields are populated, and whether
            eagerly or lazily.
        transport: Custom httpx transport used for the call.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_seconds: int = Field(default=0)
    certificate_validator: Optional[CertificateValidator] = Field(default=None)
    dispose_validator_after_use: bool = Field(default=False)
    materialization: MaterializationMode = Field(default=MaterializationMode.LAZY)
    transport: Optional[httpx.AsyncBaseTransport] = Field(default=None, exclude=True)
