#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/images.py
"""Configuration options for image resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from maestromd.constants import (
    DEFAULT_ALLOWED_IMAGE_SCHEMES,
    DEFAULT_IMAGE_TIMEOUT,
    DEFAULT_MAX_IMAGE_SIZE_BYTES,
    DEFAULT_MAX_REDIRECTS,
)
from maestromd.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ImageResolverOptions(CloneFrozenMixin):
    """Configuration options for loading images referenced by a tree.

    Parameters
    ----------
    timeout : float or None, default 10.0
        Per-image timeout in seconds. None waits indefinitely.
    max_size_bytes : int, default 20 MiB
        Maximum accepted image size; larger downloads are aborted.
    allowed_schemes : tuple of str, default ("http", "https", "data", "file")
        URL schemes the default loader may fetch.
    require_image_content_type : bool, default True
        Reject HTTP responses whose Content-Type is not ``image/*``.
    user_agent : str or None, default None
        User-Agent header. Falls back to ``MAESTROMD_USER_AGENT`` and then
        the library default.
    follow_redirects : bool, default True
        Follow HTTP redirects.
    max_redirects : int, default 5
        Maximum number of redirects to follow.

    """

    timeout: Optional[float] = field(
        default=DEFAULT_IMAGE_TIMEOUT,
        metadata={"help": "Per-image timeout in seconds", "importance": "core"},
    )
    max_size_bytes: int = field(
        default=DEFAULT_MAX_IMAGE_SIZE_BYTES,
        metadata={"help": "Maximum image size in bytes", "type": int, "importance": "security"},
    )
    allowed_schemes: tuple[str, ...] = field(
        default=DEFAULT_ALLOWED_IMAGE_SCHEMES,
        metadata={"help": "URL schemes that may be loaded", "importance": "security"},
    )
    require_image_content_type: bool = field(
        default=True,
        metadata={"help": "Require an image/* Content-Type for HTTP responses", "importance": "security"},
    )
    user_agent: Optional[str] = field(
        default=None,
        metadata={"help": "User-Agent header for HTTP requests", "importance": "advanced"},
    )
    follow_redirects: bool = field(
        default=True,
        metadata={"help": "Follow HTTP redirects", "importance": "advanced"},
    )
    max_redirects: int = field(
        default=DEFAULT_MAX_REDIRECTS,
        metadata={"help": "Maximum redirects to follow", "type": int, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate image resolver options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_size_bytes <= 0:
            raise ValueError(f"max_size_bytes must be positive, got {self.max_size_bytes}")
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be non-negative, got {self.max_redirects}")
        if not self.allowed_schemes:
            raise ValueError("allowed_schemes must not be empty")
