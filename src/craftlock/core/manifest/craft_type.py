"""The closed set of craft kinds."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class CraftType(str, Enum):
    """Kinds of craft a manifest can declare.

    Type inference only ever yields the first four; ``plugin`` and
    ``collection`` must be declared explicitly.
    """

    SKILL = "skill"
    AGENT = "agent"
    COMMAND = "command"
    HOOK = "hook"
    PLUGIN = "plugin"
    COLLECTION = "collection"

    @classmethod
    def parse(cls, value: Any) -> CraftType | None:
        """Return the matching CraftType, or None for missing/unknown values."""
        if value is None or value == "":
            return None
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Ignoring unknown craft type %r", value)
            return None
