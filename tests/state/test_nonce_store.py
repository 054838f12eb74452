# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.core.errors import AuthorizationError, NonceAlreadyUsed
from fillreactor.state.nonces import NonceStore

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20


def test_first_consume_wins_and_replay_fails() -> None:
    store = NonceStore()
    store.consume(ALICE, 7)
    assert store.is_used(ALICE, 7)
    with pytest.raises(NonceAlreadyUsed) as exc_info:
        store.consume(ALICE, 7)
    assert exc_info.value.swapper == ALICE
    assert exc_info.value.nonce == 7
    assert isinstance(exc_info.value, AuthorizationError)
    assert not exc_info.value.retryable


def test_nonces_are_per_swapper_and_unordered() -> None:
    store = NonceStore()
    store.consume(ALICE, 100)
    store.consume(ALICE, 3)
    store.consume(BOB, 100)
    assert not store.is_used(BOB, 3)
    assert len(store) == 3


def test_swapper_identity_is_case_insensitive() -> None:
    store = NonceStore()
    store.consume(ALICE.upper().replace("0X", "0x"), 1)
    assert store.is_used(ALICE, 1)


def test_invalidate_marks_nonces_used_without_settling() -> None:
    store = NonceStore()
    store.consume(ALICE, 1)
    store.invalidate(ALICE, [1, 2, 3])
    for nonce in (1, 2, 3):
        assert store.is_used(ALICE, nonce)
    with pytest.raises(NonceAlreadyUsed):
        store.consume(ALICE, 2)


def test_rollback_restores_checkpoint() -> None:
    store = NonceStore()
    store.consume(ALICE, 1)
    cp = store.checkpoint()
    store.consume(ALICE, 2)
    store.consume(BOB, 1)
    store.rollback(cp)
    assert store.is_used(ALICE, 1)
    assert not store.is_used(ALICE, 2)
    assert not store.is_used(BOB, 1)


def test_negative_nonce_rejected() -> None:
    with pytest.raises(ValueError):
        NonceStore().consume(ALICE, -1)


def test_rollback_undoes_invalidation_inside_checkpoint() -> None:
    store = NonceStore()
    store.invalidate(ALICE, [1])
    cp = store.checkpoint()
    store.invalidate(ALICE, [1, 2])
    store.rollback(cp)
    assert store.is_used(ALICE, 1)
    assert not store.is_used(ALICE, 2)


def test_nested_checkpoints() -> None:
    store = NonceStore()
    outer = store.checkpoint()
    store.consume(ALICE, 1)
    inner = store.checkpoint()
    store.consume(ALICE, 2)
    store.rollback(inner)
    assert store.is_used(ALICE, 1)
    assert not store.is_used(ALICE, 2)
    store.rollback(outer)
    assert len(store) == 0


def test_commit_closes_checkpoint() -> None:
    store = NonceStore()
    cp = store.checkpoint()
    store.consume(ALICE, 1)
    store.commit(cp)
    assert store.is_used(ALICE, 1)
    with pytest.raises(ValueError):
        store.rollback(cp)


def test_rollback_without_checkpoint_rejected() -> None:
    with pytest.raises(ValueError):
        NonceStore().rollback(0)
