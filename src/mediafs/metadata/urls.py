"""Access URL composition for files, images, and extension icons."""

from __future__ import annotations

import base64
import os
from typing import Optional
from urllib.parse import quote

from .models import AccessUrls

UNKNOWN_URL_EXTENSION = "bin"
UNKNOWN_URL_MIME = "application/octet-stream"


def encode_path_token(path: str) -> str:
    """Return the URL-safe base64 token that stands in for ``path`` in URLs.

    The token encodes the path's filesystem bytes, so names that are not
    valid UTF-8 still round-trip through `decode_path_token`.
    """
    return base64.urlsafe_b64encode(os.fsencode(path)).decode("ascii")


def decode_path_token(token: str) -> str:
    """Recover the original path from a token produced by `encode_path_token`."""
    return os.fsdecode(base64.urlsafe_b64decode(token.encode("ascii")))


class UrlComposer:
    """Build the URLs an asset-serving collaborator resolves back to files.

    Image URLs embed fixed thumbnail dimensions so the collaborator can render
    resized previews; generic URLs embed the file size instead.

    The path segment uses the URL-safe base64 alphabet (``-`` and ``_`` in
    place of ``+`` and ``/``, padded with ``=``). Servers must decode it with
    ``base64.urlsafe_b64decode`` or an equivalent; a standard-alphabet decoder
    rejects or misreads those characters. ``ext_img`` icon tokens use the
    standard alphabet because they never appear inside a URL path.
    """

    def __init__(
        self,
        *,
        thumb_width: int = 200,
        thumb_height: int = 200,
        images_prefix: str = "/api/images",
        files_prefix: str = "/api/files",
        icon_prefix: str = "/api/thirdParty",
    ) -> None:
        self.thumb_width = thumb_width
        self.thumb_height = thumb_height
        self.images_prefix = images_prefix.rstrip("/")
        self.files_prefix = files_prefix.rstrip("/")
        self.icon_prefix = icon_prefix.rstrip("/")

    def compose(
        self,
        path: str,
        entry_id: str,
        extension: Optional[str],
        mime: Optional[str],
        size: int,
        is_image: bool,
    ) -> AccessUrls:
        """Return the URL set for a file.

        Args:
            path: Full filesystem path of the file.
            entry_id: Identifier computed for the entry.
            extension: Sniffed extension, if known.
            mime: Sniffed MIME type, if known.
            size: File size in bytes.
            is_image: Whether the file is a raster image with a thumbnail.

        Returns:
            AccessUrls: Image URLs for raster images, otherwise a single file URL.
        """
        if is_image and extension and mime:
            url = self.image_url(path, entry_id, extension, mime)
            return AccessUrls(file_path=url, img_url=url, img_lazy_url=url)
        return AccessUrls(file_path=self.file_url(path, entry_id, extension, mime, size))

    def image_url(self, path: str, entry_id: str, extension: str, mime: str) -> str:
        return (
            f"{self.images_prefix}/{encode_path_token(path)}/t/{extension}"
            f"/d/{self.thumb_width}/{self.thumb_height}/m/{_mime_segment(mime)}/{entry_id}"
        )

    def file_url(
        self,
        path: str,
        entry_id: str,
        extension: Optional[str],
        mime: Optional[str],
        size: int,
    ) -> str:
        ext_segment = extension or UNKNOWN_URL_EXTENSION
        mime_segment = _mime_segment(mime or UNKNOWN_URL_MIME)
        return (
            f"{self.files_prefix}/{encode_path_token(path)}/t/{ext_segment}"
            f"/m/{mime_segment}/s/{size}/{entry_id}"
        )

    def icon_token(self, extension: Optional[str]) -> Optional[str]:
        """Return the base64 token of the fallback icon path for ``extension``."""
        if not extension:
            return None
        icon_path = f"{self.icon_prefix}/{extension}.svg"
        return base64.b64encode(icon_path.encode("utf-8")).decode("ascii")


def _mime_segment(mime: str) -> str:
    return quote(mime, safe="")


__all__ = [
    "UrlComposer",
    "encode_path_token",
    "decode_path_token",
    "UNKNOWN_URL_EXTENSION",
    "UNKNOWN_URL_MIME",
]
