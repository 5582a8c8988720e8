"""Git integration for diff mode."""

from .changes import ChangeDetector, git_toplevel

__all__ = ["ChangeDetector", "git_toplevel"]
