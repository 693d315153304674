"""Smart disk cleanup package."""

from deskx.cleanup.steps import (
    AGGRESSIVE_DAY_LIMIT,
    NORMAL_DAY_LIMIT,
    CleanupPolicy,
    Distro,
    build_cleanup_targets,
    detect_distro,
)

__all__ = [
    "AGGRESSIVE_DAY_LIMIT",
    "NORMAL_DAY_LIMIT",
    "CleanupPolicy",
    "Distro",
    "build_cleanup_targets",
    "detect_distro",
]
