"""Optimistic in-memory mutations backed by a remote write."""

import logging
from contextlib import contextmanager
from typing import Iterator, MutableSequence

logger = logging.getLogger(__name__)


@contextmanager
def optimistic_update(items: MutableSequence, label: str = "collection") -> Iterator[MutableSequence]:
    """
    Mutate a list ahead of a store call, restoring it if the block raises.

    Usage:
        with optimistic_update(self._invoices, "invoices") as invoices:
            del invoices[index]
            self.store.delete("invoice", invoice_id)

    The list is restored in place (same object, original order) and the
    exception is re-raised.
    """
    snapshot = list(items)
    try:
        yield items
    except Exception:
        items[:] = snapshot
        logger.error(f"Rolled back optimistic change to {label}")
        raise
