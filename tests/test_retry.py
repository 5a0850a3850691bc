"""
Unit tests for jobhub/retry.py
"""

from unittest.mock import MagicMock

import pytest

from jobhub.retry import call_with_retry


class TestCallWithRetry:
    def test_returns_on_first_success(self):
        fn = MagicMock(return_value=42)
        assert call_with_retry(fn, max_attempts=3) == 42
        assert fn.call_count == 1

    def test_single_attempt_by_default(self):
        fn = MagicMock(side_effect=RuntimeError("boom"))
        sleep = MagicMock()

        with pytest.raises(RuntimeError, match="boom"):
            call_with_retry(fn, sleep=sleep)
        assert fn.call_count == 1
        sleep.assert_not_called()

    def test_retries_until_success(self):
        fn = MagicMock(side_effect=[OSError("a"), OSError("b"), "ok"])
        sleep = MagicMock()

        assert call_with_retry(fn, max_attempts=3, jitter=False, sleep=sleep) == "ok"
        assert fn.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_last_exception_is_reraised(self):
        fn = MagicMock(side_effect=[OSError("first"), OSError("last")])

        with pytest.raises(OSError, match="last"):
            call_with_retry(fn, max_attempts=2, sleep=MagicMock())

    def test_non_retryable_propagates_immediately(self):
        fn = MagicMock(side_effect=KeyError("x"))

        with pytest.raises(KeyError):
            call_with_retry(fn, max_attempts=5, retryable=(OSError,), sleep=MagicMock())
        assert fn.call_count == 1

    def test_delay_is_capped(self):
        fn = MagicMock(side_effect=[OSError(), OSError(), OSError(), "ok"])
        sleep = MagicMock()

        call_with_retry(fn, max_attempts=4, base_delay=10, max_delay=15, jitter=False, sleep=sleep)
        assert [c.args[0] for c in sleep.call_args_list] == [10, 15, 15]

    def test_zero_attempts_still_calls_once(self):
        fn = MagicMock(return_value="ok")
        assert call_with_retry(fn, max_attempts=0) == "ok"
