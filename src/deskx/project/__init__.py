"""Git project scaffolding package."""

from deskx.project.init import SUBDIRS, build_project_targets, check_project_dir

__all__ = ["SUBDIRS", "build_project_targets", "check_project_dir"]
