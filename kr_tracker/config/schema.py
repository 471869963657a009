# kr_tracker/config/schema.py
"""
Pydantic configuration models for kr-tracker.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OutputConfig(BaseModel):
    """Logging and output configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )
    log_format: Literal["plain", "json"] = Field(
        default="plain", description="Log line format on stderr"
    )


class StoreConfig(BaseModel):
    """Snapshot location configuration."""

    model_config = ConfigDict(extra="ignore")

    snapshot_path: str | None = Field(
        default=None,
        description="Default snapshot JSON file (None = must be passed with --snapshot)",
    )


class DeletionConfig(BaseModel):
    """Deletion behaviour configuration."""

    model_config = ConfigDict(extra="ignore")

    require_confirmation: bool = Field(
        default=True, description="Ask before committing a deletion (--yes skips)"
    )


class KrTrackerConfig(BaseModel):
    """Root configuration for kr-tracker."""

    model_config = ConfigDict(extra="ignore")

    output: OutputConfig = Field(default_factory=OutputConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    deletion: DeletionConfig = Field(default_factory=DeletionConfig)
