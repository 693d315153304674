"""Unified archive extractor package."""

from deskx.extract.archive import (
    EXTRACTORS,
    ExtractPlan,
    UnsupportedArchiveError,
    build_extract_target,
    default_destination,
    detect_mime,
    plan_extraction,
)

__all__ = [
    "EXTRACTORS",
    "ExtractPlan",
    "UnsupportedArchiveError",
    "build_extract_target",
    "default_destination",
    "detect_mime",
    "plan_extraction",
]
