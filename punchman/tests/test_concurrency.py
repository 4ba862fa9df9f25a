"""
Concurrency and retry tests for the punch engine.

Uses the in-memory store so real threads can race on one card.
"""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from punchman.exceptions import PunchmanError, TransientStorageError
from punchman.locks import CardLockRegistry
from punchman.protocols.session import SessionPayload
from punchman.services.punch import PunchEngine, get_engine
from punchman.tests.fakes import (
    MEMORY_MERCHANT_ID,
    InMemoryPunchCardStore,
    StaticProgramPolicy,
    make_requirements,
)


STAFF = SessionPayload(user_id=str(uuid.uuid4()), merchant_id=MEMORY_MERCHANT_ID, role="staff")


def _engine(required_punches, delay=0.002):
    requirements = make_requirements(required_punches)
    store = InMemoryPunchCardStore(delay=delay)
    locks = CardLockRegistry()
    engine = PunchEngine(store, StaticProgramPolicy(requirements), locks=locks)
    assert engine.locks is locks
    return engine, store, locks, requirements.loyalty_program_id


def _run_concurrently(fn, count):
    """Run fn(i) on `count` threads released at the same instant."""
    barrier = threading.Barrier(count)

    def call(i):
        barrier.wait()
        try:
            return fn(i)
        except PunchmanError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(call, range(count)))


class TestConcurrentPunches:
    def test_exactly_one_reward(self):
        engine, store, locks, program_id = _engine(required_punches=8)
        user_id = str(uuid.uuid4())

        results = _run_concurrently(lambda i: engine.apply_punch(program_id, user_id), 8)

        assert not [r for r in results if isinstance(r, PunchmanError)]
        assert sum(1 for r in results if r.reward_achieved) == 1
        assert sorted(r.current_punches for r in results) == list(range(1, 9))
        (card,) = store.cards.values()
        assert card.current_punches == 8
        assert len(store.punches) == 8
        assert len(locks) == 0

    def test_extra_punches_rejected(self):
        engine, store, locks, program_id = _engine(required_punches=5)
        user_id = str(uuid.uuid4())

        results = _run_concurrently(lambda i: engine.apply_punch(program_id, user_id), 12)

        errors = [r for r in results if isinstance(r, PunchmanError)]
        successes = [r for r in results if not isinstance(r, PunchmanError)]
        assert len(successes) == 5
        assert len(errors) == 7
        assert {e.code for e in errors} == {"REWARD_ALREADY_READY"}
        assert sum(1 for r in successes if r.reward_achieved) == 1
        (card,) = store.cards.values()
        assert card.current_punches == 5

    def test_one_card_per_pair_under_race(self):
        engine, store, _, program_id = _engine(required_punches=20)
        user_id = str(uuid.uuid4())

        _run_concurrently(lambda i: engine.apply_punch(program_id, user_id), 10)

        assert len(store.cards) == 1

    def test_distinct_users_do_not_interfere(self):
        engine, store, _, program_id = _engine(required_punches=3)
        users = [str(uuid.uuid4()) for _ in range(6)]

        results = _run_concurrently(lambda i: engine.apply_punch(program_id, users[i]), 6)

        assert all(r.current_punches == 1 for r in results)
        assert len(store.cards) == 6


class TestConcurrentRedemption:
    def test_single_redemption_wins(self):
        engine, store, _, program_id = _engine(required_punches=2)
        user_id = str(uuid.uuid4())
        engine.apply_punch(program_id, user_id)
        card_id = engine.apply_punch(program_id, user_id).new_punch_card.id

        results = _run_concurrently(lambda i: engine.redeem(card_id, STAFF), 6)

        errors = [r for r in results if isinstance(r, PunchmanError)]
        assert len(errors) == 5
        assert {e.code for e in errors} == {"REWARD_NOT_READY"}
        card = store.cards[card_id]
        assert card.current_punches == 0
        assert card.rewards_redeemed == 1

    def test_punch_and_redeem_interleave(self):
        engine, store, _, program_id = _engine(required_punches=1)
        user_id = str(uuid.uuid4())
        card_id = engine.apply_punch(program_id, user_id).new_punch_card.id

        def step(i):
            if i % 2:
                return engine.redeem(card_id, STAFF)
            return engine.apply_punch(program_id, user_id)

        _run_concurrently(step, 8)

        card = store.cards[card_id]
        assert 0 <= card.current_punches <= 1
        # Every redemption consumed exactly one completed cycle
        assert len(store.punches) == card.rewards_redeemed + card.current_punches


class TestSharedRegistry:
    def test_default_engines_share_one_registry(self):
        first, second = get_engine(), get_engine()

        assert first.locks is second.locks
        assert len(first.locks) == 0

    def test_empty_registry_is_kept(self):
        locks = CardLockRegistry()
        engine = PunchEngine(InMemoryPunchCardStore(), StaticProgramPolicy(), locks=locks)
        assert engine.locks is locks

    def test_engine_per_request_no_overflow(self):
        """One engine per request, as scan() does, all sharing the registry."""
        requirements = make_requirements(3)
        store = InMemoryPunchCardStore(delay=0.01)
        policy = StaticProgramPolicy(requirements)
        locks = CardLockRegistry()
        engines = [PunchEngine(store, policy, locks=locks) for _ in range(6)]
        user_id = str(uuid.uuid4())

        results = _run_concurrently(
            lambda i: engines[i].apply_punch(requirements.loyalty_program_id, user_id), 6
        )

        successes = [r for r in results if not isinstance(r, PunchmanError)]
        errors = [r for r in results if isinstance(r, PunchmanError)]
        assert sorted(r.current_punches for r in successes) == [1, 2, 3]
        assert {e.code for e in errors} == {"REWARD_ALREADY_READY"}
        (card,) = store.cards.values()
        assert card.current_punches == 3
        assert len(store.punches) == 3
        assert len(locks) == 0


class FlakyStore(InMemoryPunchCardStore):
    """Raises TransientStorageError on the first `failures` locked reads."""

    def __init__(self, failures):
        super().__init__()
        self.failures = failures
        self.calls = 0

    def get_for_update(self, punch_card_id):
        self.calls += 1
        if self.calls <= self.failures:
            raise TransientStorageError(detail="database is locked")
        return super().get_for_update(punch_card_id)


class TestTransientFailures:
    def _engine(self, failures):
        requirements = make_requirements(3)
        store = FlakyStore(failures)
        engine = PunchEngine(store, StaticProgramPolicy(requirements))
        return engine, store, requirements.loyalty_program_id

    def test_retried_once(self):
        engine, store, program_id = self._engine(failures=1)

        result = engine.apply_punch(program_id, str(uuid.uuid4()))

        assert result.current_punches == 1
        assert store.calls == 2
        assert len(store.punches) == 1

    def test_second_failure_is_service_error(self):
        engine, store, program_id = self._engine(failures=2)

        with pytest.raises(PunchmanError) as exc_info:
            engine.apply_punch(program_id, str(uuid.uuid4()))

        assert exc_info.value.code == "SERVICE_ERROR"
        assert store.calls == 2
        assert store.punches == []

    def test_business_errors_not_retried(self):
        engine, store, program_id = self._engine(failures=0)
        user_id = str(uuid.uuid4())
        for _ in range(3):
            engine.apply_punch(program_id, user_id)
        store.calls = 0

        with pytest.raises(PunchmanError, match="REWARD_ALREADY_READY"):
            engine.apply_punch(program_id, user_id)
        assert store.calls == 1


class TestCardLockRegistry:
    def test_released_after_use(self):
        locks = CardLockRegistry()
        with locks.hold("a"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_released_on_error(self):
        locks = CardLockRegistry()
        with pytest.raises(RuntimeError):
            with locks.hold("a"):
                raise RuntimeError("boom")
        assert len(locks) == 0

    def test_keys_independent(self):
        locks = CardLockRegistry()
        with locks.hold("a"):
            acquired = threading.Event()

            def other():
                with locks.hold("b"):
                    acquired.set()

            thread = threading.Thread(target=other)
            thread.start()
            assert acquired.wait(timeout=1)
            thread.join()
