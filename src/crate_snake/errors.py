"""Exception types raised by the engine and the crate economy."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Setup parameters that can never produce a valid run."""


class InvalidCallError(ValueError):
    """A call was made with missing or wrongly shaped arguments."""
