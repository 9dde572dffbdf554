"""Exception types raised by the card codec, classifier and canonical table."""
from __future__ import annotations


class HoldemError(Exception):
    """Base class for every error raised by the evaluation core."""


class InvalidCard(HoldemError, ValueError):
    """Rank or suit outside the valid range, or unparsable card text."""


class InvalidHand(HoldemError, ValueError):
    """Wrong number of cards, or the same card repeated within a hand."""


class ClassNotFound(HoldemError, LookupError):
    """A classified hand has no entry in the canonical table.

    This only happens when the classifier and the table builder disagree, so
    callers should treat it as fatal rather than retry.
    """


class TableIntegrityError(HoldemError, RuntimeError):
    """The canonical table did not come out with the expected class count."""
