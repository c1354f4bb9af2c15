"""
Local directory layout policies for synced repositories.
"""

import logging
from enum import Enum
from pathlib import PurePosixPath
from typing import Union

logger = logging.getLogger(__name__)


class Layout(Enum):
    """How a repository's local directory is named."""
    NESTED = "nested"            # owner/name
    FLAT_PREFIX = "flat-prefix"  # owner-name
    FLAT = "flat"                # name (collisions across owners are possible)

    @classmethod
    def parse(cls, value: Union[str, 'Layout', None]) -> 'Layout':
        """Parse a layout name, falling back to NESTED for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or cls.NESTED.value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown layout {value!r}, using nested")
            return cls.NESTED


def destination_path(owner: str, name: str, layout: Union[str, Layout]) -> PurePosixPath:
    """
    Map a repository to its path relative to the sync root.

    Examples:
        destination_path("acme", "widgets", Layout.NESTED)      -> acme/widgets
        destination_path("acme", "widgets", Layout.FLAT_PREFIX) -> acme-widgets
        destination_path("acme", "widgets", Layout.FLAT)        -> widgets
    """
    layout = Layout.parse(layout)

    if layout is Layout.FLAT_PREFIX:
        return PurePosixPath(f"{owner}-{name}")
    if layout is Layout.FLAT:
        return PurePosixPath(name)
    return PurePosixPath(owner, name)
