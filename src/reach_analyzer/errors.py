"""Exception types raised by reach-analyzer."""

from __future__ import annotations


class ReachError(Exception):
    """Base class for all reach-analyzer errors."""


class ConfigError(ReachError):
    """Required input missing or invalid. Raised before any analysis starts."""


class ProgramLoadError(ReachError):
    """The program model could not be built or loaded. Fatal for the run."""
