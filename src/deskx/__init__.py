"""DeskX - batch automation for Linux workstation chores."""

__version__ = "0.1.0"
