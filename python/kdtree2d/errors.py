from __future__ import annotations


class KdTreeError(Exception):
    """Base class for errors raised by kdtree2d."""


class InvalidInputError(KdTreeError, ValueError):
    """Point data handed to the builder can't be used."""


class InvalidArgumentError(KdTreeError, ValueError):
    """Query argument is out of range."""
