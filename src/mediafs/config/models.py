"""Configuration models describing mediafs settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MediaFSBaseModel(BaseModel):
    """Shared configuration for mediafs Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class AdapterSettings(MediaFSBaseModel):
    """Settings for the sandboxed local adapter.

    Attributes:
        root_path: Directory that confines listings and path operations.
        directory_color: Display color attached to directory entries.
        dir_mode: Permission bits applied to newly created directories.
    """

    root_path: str = "."
    directory_color: str = "#3949AB"
    dir_mode: int = 0o755


class SniffingSettings(MediaFSBaseModel):
    """Binary type detection settings.

    Attributes:
        prefix_bytes: Number of leading bytes read for signature detection.
        detect_text: Whether unmatched UTF-8 content is reported as plain text.
    """

    prefix_bytes: int = Field(default=4100, gt=0)
    detect_text: bool = True


class ThumbnailSettings(MediaFSBaseModel):
    """Dimensions requested from the thumbnail service.

    Attributes:
        width: Thumbnail width in pixels.
        height: Thumbnail height in pixels.
    """

    width: int = Field(default=200, gt=0)
    height: int = Field(default=200, gt=0)


class UrlSettings(MediaFSBaseModel):
    """Route prefixes understood by the asset-serving collaborator.

    Attributes:
        images_prefix: Prefix for thumbnail and full-resolution image URLs.
        files_prefix: Prefix for generic file download URLs.
        icon_prefix: Prefix for fallback extension icons.
    """

    images_prefix: str = "/api/images"
    files_prefix: str = "/api/files"
    icon_prefix: str = "/api/thirdParty"


class LoggingSettings(MediaFSBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; enables a rotating file handler.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5


class CLIOptions(MediaFSBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        json_default: Whether commands emit JSON unless told otherwise.
        sort_entries: Whether listings are sorted by name before display.
    """

    json_default: bool = False
    sort_entries: bool = False


class MediaFSConfig(MediaFSBaseModel):
    """Top-level configuration struct for mediafs.

    Attributes:
        adapter: Sandbox root and directory defaults.
        sniffing: Type detection settings.
        thumbnails: Thumbnail dimensions embedded in image URLs.
        urls: Route prefixes for generated URLs.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    adapter: AdapterSettings = Field(default_factory=AdapterSettings)
    sniffing: SniffingSettings = Field(default_factory=SniffingSettings)
    thumbnails: ThumbnailSettings = Field(default_factory=ThumbnailSettings)
    urls: UrlSettings = Field(default_factory=UrlSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "MediaFSBaseModel",
    "AdapterSettings",
    "SniffingSettings",
    "ThumbnailSettings",
    "UrlSettings",
    "LoggingSettings",
    "CLIOptions",
    "MediaFSConfig",
]
