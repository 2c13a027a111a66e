"""
Render settings loaded from environment variables.

Every field can be overridden with a ``DESIGNRENDER_``-prefixed variable,
for example ``DESIGNRENDER_SHARED_CLASS_THRESHOLD=3``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderSettings(BaseSettings):
    """Options that shape the emitted markup and stylesheets."""

    model_config = SettingsConfigDict(
        env_prefix="DESIGNRENDER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Class extraction
    shared_class_threshold: int = Field(
        default=2,
        ge=2,
        description="Occurrences a style pattern needs before it becomes a shared class",
    )
    class_scope: str = Field(
        default="[data-design-render]",
        description="Selector prefixed to shared class rules",
    )

    # Document
    outline_padding: int = Field(
        default=4,
        ge=0,
        description="Pixels reserved around the viewport so debug outlines never clip",
    )
    debug_enabled: bool = Field(
        default=True,
        description="Render the geometry-only debug overlay",
    )

    # Asset references
    image_url_template: str = Field(
        default="images/{image_id}.png",
        description="URL for image paints; receives image_id",
    )
    svg_url_template: str = Field(
        default="svgs/{svg_file}",
        description="URL for baked vector files; receives svg_file",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the command line tool",
    )


@lru_cache
def get_settings() -> RenderSettings:
    """
    Get the cached settings instance.

    Returns:
        RenderSettings loaded from the environment on first call.
    """
    return RenderSettings()


__all__ = ["RenderSettings", "get_settings"]
