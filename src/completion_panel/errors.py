"""Exceptions raised by the panel lifecycle."""

from __future__ import annotations


class ContractViolation(RuntimeError):
    """An operation was invoked outside its required lifecycle phase."""


class EpisodeAbort(Exception):
    """Unwind every active interactive episode back to the top level."""
