# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.state.balances import BalanceTable

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
TOKEN = "0x" + "70" * 20


def test_zero_balances_are_not_stored() -> None:
    table = BalanceTable()
    table.add(ALICE, TOKEN, 5)
    table.subtract(ALICE, TOKEN, 5)
    assert table.get_all_balances() == {}
    with pytest.raises(ValueError):
        table.subtract(ALICE, TOKEN, 1)


def test_rollback_replays_only_writes_since_checkpoint() -> None:
    table = BalanceTable()
    table.set(ALICE, TOKEN, 100)
    cp = table.checkpoint()
    table.subtract(ALICE, TOKEN, 40)
    table.add(BOB, TOKEN, 40)
    table.add(BOB, TOKEN, 1)
    table.rollback(cp)
    assert table.get_all_balances() == {(ALICE, TOKEN): 100}


def test_nested_rollback_and_commit() -> None:
    table = BalanceTable()
    outer = table.checkpoint()
    table.set(ALICE, TOKEN, 10)
    inner = table.checkpoint()
    table.set(ALICE, TOKEN, 0)
    table.rollback(inner)
    assert table.get(ALICE, TOKEN) == 10
    table.commit(outer)
    assert table.get(ALICE, TOKEN) == 10
    with pytest.raises(ValueError):
        table.rollback(outer)


def test_writes_outside_checkpoint_are_not_logged() -> None:
    table = BalanceTable()
    table.set(ALICE, TOKEN, 1)
    with pytest.raises(ValueError):
        table.rollback(0)
    assert table.total_supply(TOKEN) == 1
