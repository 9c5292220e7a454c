"""Mapping between file order and presentation order.

Transactions are parsed in file order (index 0 is the first entry written)
but callers see them newest first (id 0 is the last entry written). The
mapping depends on ``total_count`` and nothing else, so the count must come
from the same parse that is used to locate the transaction.
"""

from .errors import NotFound


def _check_bounds(index, total_count, requested):
    if isinstance(index, bool) or not isinstance(index, int):
        raise NotFound(requested, total_count)
    if index < 0 or index >= total_count:
        raise NotFound(requested, total_count)


def to_presentation_id(file_index, total_count):
    _check_bounds(file_index, total_count, file_index)
    return (total_count - 1) - file_index


def to_file_index(presentation_id, total_count):
    _check_bounds(presentation_id, total_count, presentation_id)
    return (total_count - 1) - presentation_id


def assign(transactions):
    """Return ``(presentation_id, transaction)`` pairs, newest first."""
    total_count = len(transactions)
    return [
        (to_presentation_id(file_index, total_count), transaction)
        for file_index, transaction in reversed(list(enumerate(transactions)))
    ]
