"""craftlock: dependency resolution and lockfiles for AI assistant crafts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Written into every generated lockfile as the ``generatedBy`` field.
_PRODUCT_ID = "craftlock"
