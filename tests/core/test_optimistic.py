"""Tests for optimistic_update."""

import pytest

from core.optimistic import optimistic_update


class TestOptimisticUpdate:

    def test_change_kept_on_success(self):
        """Mutations inside the block stick when nothing raises."""
        items = ["a", "b", "c"]

        with optimistic_update(items) as current:
            current.remove("b")

        assert items == ["a", "c"]

    def test_restored_on_failure(self):
        """The list is put back in its original order and the error re-raised."""
        items = ["a", "b", "c"]

        with pytest.raises(ConnectionError):
            with optimistic_update(items) as current:
                del current[1]
                raise ConnectionError("store unreachable")

        assert items == ["a", "b", "c"]

    def test_restores_same_object(self):
        """Callers holding a reference see the restored contents."""
        items = [1, 2, 3]
        alias = items

        with pytest.raises(RuntimeError):
            with optimistic_update(items):
                items.clear()
                raise RuntimeError("nope")

        assert alias is items
        assert alias == [1, 2, 3]

    def test_rollback_is_logged(self, caplog):
        """A rollback logs the collection label."""
        with pytest.raises(ValueError):
            with optimistic_update([1], "invoices"):
                raise ValueError("bad")

        assert "invoices" in caplog.text
