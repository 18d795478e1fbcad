"""Lexical content filter applied to post messages before they are returned."""

from collections.abc import Iterable


def is_filtered(message: str, blocklist: Iterable[str]) -> bool:
    """Return ``True`` if *message* contains any term from *blocklist*.

    Matching is an exact, case-sensitive substring test with no
    normalization.  Empty terms never match.
    """
    for term in blocklist:
        if term and term in message:
            return True
    return False
