"""Pydantic models for reconfigure failure reports."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Categories of reconfigure failures."""
    TRANSPORT = "transport"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    FATAL = "fatal"


class ReconfigureFailureMessage(BaseModel):
    """One failure reported during a reconfigure cycle."""

    kind: FailureKind = Field(description="Failure category")
    operation: str = Field(description="Device operation or step that failed")
    message: str = Field(default="", description="Human-readable description")
    status: Optional[str] = Field(default=None, description="Device status code name, if any")
    aborted_cycle: bool = Field(default=False, description="Whether the failure ended the cycle")
    timestamp: float = Field(description="Unix timestamp")
