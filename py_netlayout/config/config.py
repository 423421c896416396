"""Layout engine settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.voxel_boundary import CorridorStrategy


class LayoutSettings(BaseSettings):
    """Engine settings, overridable through NETLAYOUT_* environment variables."""

    # Grid placement
    grid_spacing: float = Field(default=80.0, gt=0, description="World units per grid cell")
    group_spacing: int = Field(default=3, ge=0, description="Free grid units kept around other groups")
    max_search_radius: int = Field(default=100, ge=0, description="Rings scanned before unconstrained fallback")

    # Group boundaries
    voxel_padding: float = Field(default=20.0, gt=0, description="Half-extent of the cube around each node")
    merge_tolerance: float = Field(default=0.01, gt=0, description="Endpoint distance treated as touching")
    corridor_strategy: CorridorStrategy = Field(
        default=CorridorStrategy.NEAREST,
        description="How node voxels are joined (nearest or spanning_tree)",
    )

    # Edge arcs
    arc_segments: int = Field(default=50, ge=1, description="Segments per edge arc")
    arc_height_ratio: float = Field(default=0.3, ge=0, description="Arc height as a fraction of edge length")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    model_config = SettingsConfigDict(
        env_prefix="NETLAYOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, value: str) -> str:
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value


settings = LayoutSettings()
