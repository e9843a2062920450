"""Unit tests for caller-supplied store deadlines."""

from claim.persistence.deadline import effective_timeout, store_deadline


class TestEffectiveTimeout:
    """Tests for effective_timeout()."""

    def test_without_deadline_uses_own_timeout(self):
        assert effective_timeout(5.0) == 5.0
        assert effective_timeout(None) is None

    def test_deadline_tightens_own_timeout(self):
        with store_deadline(1.0):
            assert effective_timeout(5.0) <= 1.0
            assert effective_timeout(None) <= 1.0

    def test_own_timeout_kept_when_tighter(self):
        with store_deadline(10.0):
            assert effective_timeout(0.5) == 0.5

    def test_nested_deadline_cannot_extend_outer(self):
        """An inner block asking for more time still ends with the outer one."""
        with store_deadline(1.0):
            with store_deadline(60.0):
                assert effective_timeout(None) <= 1.0

    def test_expired_deadline_leaves_no_time(self):
        with store_deadline(-1.0):
            assert effective_timeout(5.0) == 0.0

    def test_deadline_cleared_on_exit(self):
        with store_deadline(1.0):
            pass

        assert effective_timeout(None) is None
