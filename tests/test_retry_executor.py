"""Tests for the retry executor.

Tests cover:
- Attempt counts and delay sequences for always-transient operations
- Recovery after k-1 transient failures
- Non-transient short-circuit on the first failure
- Custom classifiers and backoff functions
- Exceptions that must never be caught
"""

import httpx
import pytest

from charmretry.core.config import RetryConfig
from charmretry.core.errors import ErrorClassifier
from charmretry.execution.retry import (
    NonTransientFailure,
    RetryExecutor,
    Success,
    TransientFailure,
)
from tests.helpers import SleepRecorder, always_raising, scripted


@pytest.fixture
def executor(sleeper: SleepRecorder) -> RetryExecutor:
    return RetryExecutor(sleep=sleeper)


class TestImmediateSuccess:
    """Operations that succeed on the first attempt."""

    def test_returns_value_without_delay(
        self, executor: RetryExecutor, sleeper: SleepRecorder, three_attempts: RetryConfig
    ) -> None:
        op = scripted(["ready"])

        outcome = executor.execute(op, three_attempts)

        assert outcome == Success(value="ready", attempts=1, delays=())
        assert op.calls == 1
        assert sleeper.delays == []

    def test_none_is_a_valid_result(
        self, executor: RetryExecutor, three_attempts: RetryConfig
    ) -> None:
        outcome = executor.execute(lambda: None, three_attempts)

        assert isinstance(outcome, Success)
        assert outcome.value is None


class TestTransientExhaustion:
    """Operations that always fail transiently."""

    @pytest.mark.parametrize("max_attempts", [1, 2, 3, 5, 8])
    def test_invoked_exactly_max_attempts_times(
        self, executor: RetryExecutor, sleeper: SleepRecorder, max_attempts: int
    ) -> None:
        config = RetryConfig(max_attempts=max_attempts, base_delay=0.5, multiplier=3.0)
        op = always_raising(ConnectionRefusedError("connection refused"))

        outcome = executor.execute(op, config)

        assert isinstance(outcome, TransientFailure)
        assert op.calls == max_attempts
        assert outcome.attempts == max_attempts
        expected = [config.delay_for(i) for i in range(1, max_attempts)]
        assert sleeper.delays == expected
        assert list(outcome.delays) == expected

    def test_single_attempt_never_sleeps(
        self, executor: RetryExecutor, sleeper: SleepRecorder
    ) -> None:
        op = always_raising(TimeoutError("timed out"))

        outcome = executor.execute(op, RetryConfig(max_attempts=1, base_delay=10.0))

        assert isinstance(outcome, TransientFailure)
        assert op.calls == 1
        assert sleeper.delays == []

    def test_three_attempts_exponential_scenario(
        self, executor: RetryExecutor, sleeper: SleepRecorder, three_attempts: RetryConfig
    ) -> None:
        """maxAttempts=3, baseDelay=1s, multiplier 2: delays of 1s then 2s."""
        error = ConnectionResetError("connection reset by peer")
        op = always_raising(error)

        outcome = executor.execute(op, three_attempts)

        assert isinstance(outcome, TransientFailure)
        assert outcome.cause is error
        assert op.calls == 3
        assert sleeper.delays == [1.0, 2.0]

    def test_cause_is_last_attempts_error(
        self, executor: RetryExecutor, three_attempts: RetryConfig
    ) -> None:
        last = TimeoutError("third")
        op = scripted([ConnectionRefusedError("first"), TimeoutError("second"), last])

        outcome = executor.execute(op, three_attempts)

        assert isinstance(outcome, TransientFailure)
        assert outcome.cause is last


class TestRecovery:
    """Operations that succeed after some transient failures."""

    @pytest.mark.parametrize("k", [1, 2, 3, 4])
    def test_success_on_attempt_k(
        self, executor: RetryExecutor, sleeper: SleepRecorder, k: int
    ) -> None:
        config = RetryConfig(max_attempts=4, base_delay=1.0)
        op = scripted([ConnectionRefusedError("down")] * (k - 1) + ["up"])

        outcome = executor.execute(op, config)

        assert isinstance(outcome, Success)
        assert outcome.value == "up"
        assert outcome.attempts == k
        assert op.calls == k
        assert len(sleeper.delays) == k - 1
        assert sleeper.delays == [config.delay_for(i) for i in range(1, k)]

    def test_httpx_connect_error_is_retried(
        self, executor: RetryExecutor, three_attempts: RetryConfig
    ) -> None:
        op = scripted([httpx.ConnectError("connection refused"), {"status": "ok"}])

        outcome = executor.execute(op, three_attempts)

        assert outcome == Success(value={"status": "ok"}, attempts=2, delays=(1.0,))


class TestNonTransient:
    """Non-transient failures short-circuit without retry."""

    def test_first_attempt_non_transient(
        self, executor: RetryExecutor, sleeper: SleepRecorder, three_attempts: RetryConfig
    ) -> None:
        error = ValueError("malformed plan")
        op = always_raising(error)

        outcome = executor.execute(op, three_attempts)

        assert isinstance(outcome, NonTransientFailure)
        assert outcome.cause is error
        assert outcome.attempts == 1
        assert op.calls == 1
        assert sleeper.delays == []

    def test_non_transient_after_transient_stops_immediately(
        self, executor: RetryExecutor, sleeper: SleepRecorder
    ) -> None:
        config = RetryConfig(max_attempts=5, base_delay=1.0)
        error = KeyError("service")
        op = scripted([ConnectionRefusedError("down"), error, "never reached"])

        outcome = executor.execute(op, config)

        assert isinstance(outcome, NonTransientFailure)
        assert outcome.cause is error
        assert outcome.attempts == 2
        assert op.calls == 2
        assert sleeper.delays == [1.0]

    def test_keyboard_interrupt_propagates(
        self, executor: RetryExecutor, three_attempts: RetryConfig
    ) -> None:
        op = always_raising(KeyboardInterrupt())

        with pytest.raises(KeyboardInterrupt):
            executor.execute(op, three_attempts)

        assert op.calls == 1


class TestConfiguration:
    """Classifier and backoff supplied per call site."""

    def test_custom_classifier(self, sleeper: SleepRecorder) -> None:
        class SupervisorDown(Exception):
            pass

        executor = RetryExecutor(
            classifier=ErrorClassifier(transient_types=[SupervisorDown]),
            sleep=sleeper,
        )
        op = scripted([SupervisorDown(), SupervisorDown(), "ok"])

        outcome = executor.execute(op, RetryConfig(max_attempts=3, base_delay=0.1))

        assert isinstance(outcome, Success)
        assert op.calls == 3

    def test_custom_classifier_excludes_defaults(self, sleeper: SleepRecorder) -> None:
        executor = RetryExecutor(
            classifier=ErrorClassifier(transient_types=[]),
            sleep=sleeper,
        )
        op = always_raising(ConnectionRefusedError())

        outcome = executor.execute(op, RetryConfig(max_attempts=3, base_delay=0.1))

        assert isinstance(outcome, NonTransientFailure)
        assert op.calls == 1

    def test_custom_backoff_fn(
        self, executor: RetryExecutor, sleeper: SleepRecorder
    ) -> None:
        config = RetryConfig(
            max_attempts=4,
            base_delay=0,
            backoff_fn=lambda attempt: attempt * 10.0,
        )
        op = always_raising(TimeoutError())

        executor.execute(op, config)

        assert sleeper.delays == [10.0, 20.0, 30.0]

    def test_executor_holds_no_state_between_calls(
        self, executor: RetryExecutor, sleeper: SleepRecorder, three_attempts: RetryConfig
    ) -> None:
        executor.execute(always_raising(TimeoutError()), three_attempts)
        sleeper.delays.clear()

        op = scripted([TimeoutError(), "ok"])
        outcome = executor.execute(op, three_attempts)

        assert isinstance(outcome, Success)
        assert sleeper.delays == [1.0]

    def test_default_sleep_is_time_sleep(self) -> None:
        import time

        assert RetryExecutor()._sleep is time.sleep
