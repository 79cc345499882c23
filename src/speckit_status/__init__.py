"""speckit-status: progress and phase availability for Spec Kit tasks.md files."""

from speckit_status.config import VERSION

__version__ = VERSION

__all__ = ["__version__"]
