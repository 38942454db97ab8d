"""Alignment error types."""

from __future__ import annotations


class AlignmentError(Exception):
    """Base class for everything the alignment engine raises."""


class InvalidInputError(AlignmentError, ValueError):
    """Script or transcript unusable; detected before any work is done."""


class AlignmentInvariantError(AlignmentError, RuntimeError):
    """The DP traceback or assembly produced an impossible state.

    This is a defect in the engine, never a property of the input.
    """
