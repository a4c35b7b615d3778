#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/base.py
"""Base classes for parser and renderer options.

Options are frozen dataclasses. Use :meth:`CloneFrozenMixin.create_updated` to derive a
modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Parameters
    ----------
    fail_on_resource_errors : bool, default=False
        Whether to raise RenderingError when a resource referenced by the
        tree (an image) is not available. If False (default), the resource
        is skipped and a debug message is logged.

    """

    fail_on_resource_errors: bool = field(
        default=False,
        metadata={
            "help": "Raise RenderingError on missing resources (images) instead of skipping them",
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate base renderer options."""
        pass


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options."""

    def __post_init__(self) -> None:
        """Validate base parser options."""
        pass
