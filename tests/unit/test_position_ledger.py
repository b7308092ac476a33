"""
Тесты для Position Ledger

Coverage:
- record_deposit / clear_position / read_position / read_total
- Инвариант Total == Σ Position после каждой мутации
- Цикл позиции empty → active → empty → active
- snapshot / restore
- Случайные последовательности операций
"""

import random

import pytest

from src.core.domain.position import Balances
from src.core.errors import LedgerCorruption, NoShares
from src.fund.ledger import PositionLedger


@pytest.fixture
def ledger():
    """Пустой Ledger."""
    return PositionLedger()


class TestRecordDeposit:
    """Тесты для record_deposit"""

    def test_first_deposit_creates_position(self, ledger) -> None:
        """Позиция создаётся неявно при первом депозите"""
        assert ledger.read_position("alice").is_empty

        position = ledger.record_deposit("alice", 150, 100)

        assert position == Balances(balance_a=150, balance_b=100)
        assert ledger.read_position("alice") == position
        assert ledger.read_total() == position

    def test_repeated_deposits_accumulate(self, ledger) -> None:
        """Повторные депозиты увеличивают позицию и Total"""
        ledger.record_deposit("alice", 150, 100)
        ledger.record_deposit("alice", 10, 20)
        ledger.record_deposit("bob", 1, 2)

        assert ledger.read_position("alice") == Balances(balance_a=160, balance_b=120)
        assert ledger.read_total() == Balances(balance_a=161, balance_b=122)
        ledger.verify()

    def test_zero_deposit_allowed(self, ledger) -> None:
        """Нулевые суммы допустимы"""
        ledger.record_deposit("alice", 0, 0)
        assert ledger.read_total().is_empty
        assert ledger.investors() == ["alice"]

    def test_negative_amount_rejected_without_mutation(self, ledger) -> None:
        """Отрицательная сумма отклоняется, состояние не меняется"""
        ledger.record_deposit("alice", 5, 5)
        with pytest.raises(ValueError):
            ledger.record_deposit("alice", 10, -1)

        assert ledger.read_position("alice") == Balances(balance_a=5, balance_b=5)
        assert ledger.read_total() == Balances(balance_a=5, balance_b=5)


class TestClearPosition:
    """Тесты для clear_position"""

    def test_returns_and_zeroes_position(self, ledger) -> None:
        """Возвращает позицию и обнуляет её, уменьшая Total"""
        ledger.record_deposit("alice", 150, 100)
        ledger.record_deposit("bob", 150, 100)

        cleared = ledger.clear_position("alice")

        assert cleared == Balances(balance_a=150, balance_b=100)
        assert ledger.read_position("alice").is_empty
        assert ledger.read_total() == Balances(balance_a=150, balance_b=100)
        ledger.verify()

    def test_empty_position_raises_no_shares(self, ledger) -> None:
        """Пустая позиция → NoShares"""
        with pytest.raises(NoShares):
            ledger.clear_position("alice")

    def test_double_clear_raises_no_shares(self, ledger) -> None:
        """Повторное обнуление → NoShares"""
        ledger.record_deposit("alice", 1, 1)
        ledger.clear_position("alice")
        with pytest.raises(NoShares):
            ledger.clear_position("alice")

    def test_position_never_deleted(self, ledger) -> None:
        """Позиция обнуляется, но инвестор остаётся известным"""
        ledger.record_deposit("alice", 1, 1)
        ledger.clear_position("alice")
        assert "alice" in ledger.investors()

    def test_fresh_claim_after_full_withdrawal(self, ledger) -> None:
        """После обнуления новый депозит начинает долю с нуля"""
        ledger.record_deposit("alice", 100, 100)
        ledger.clear_position("alice")
        ledger.record_deposit("alice", 7, 3)

        assert ledger.read_position("alice") == Balances(balance_a=7, balance_b=3)
        ledger.verify()

    def test_total_underflow_is_corruption(self, ledger) -> None:
        """Total меньше позиции → LedgerCorruption"""
        ledger.record_deposit("alice", 10, 10)
        positions, _ = ledger.snapshot()
        ledger.restore((positions, Balances(balance_a=5, balance_b=10)))

        with pytest.raises(LedgerCorruption):
            ledger.clear_position("alice")


class TestVerifyAndSnapshot:
    """Тесты verify / snapshot / restore"""

    def test_verify_detects_divergence(self, ledger) -> None:
        """Расхождение Total и суммы позиций обнаруживается"""
        ledger.record_deposit("alice", 10, 10)
        positions, _ = ledger.snapshot()
        ledger.restore((positions, Balances(balance_a=11, balance_b=10)))

        with pytest.raises(LedgerCorruption, match="sum of positions"):
            ledger.verify()

    def test_restore_rolls_back(self, ledger) -> None:
        """restore возвращает состояние на момент snapshot"""
        ledger.record_deposit("alice", 10, 10)
        state = ledger.snapshot()

        ledger.record_deposit("bob", 5, 5)
        ledger.clear_position("alice")
        ledger.restore(state)

        assert ledger.read_position("alice") == Balances(balance_a=10, balance_b=10)
        assert ledger.read_position("bob").is_empty
        assert ledger.read_total() == Balances(balance_a=10, balance_b=10)

    def test_snapshot_isolated_from_later_mutations(self, ledger) -> None:
        """Последующие мутации не меняют снимок"""
        state = ledger.snapshot()
        ledger.record_deposit("alice", 1, 1)
        positions, total = state
        assert positions == {}
        assert total.is_empty


class TestInvariant:
    """Инвариант на случайных последовательностях"""

    @pytest.mark.parametrize("seed", range(20))
    def test_total_equals_sum_after_every_operation(self, seed: int) -> None:
        """Total == Σ Position после каждой операции"""
        rng = random.Random(seed)
        ledger = PositionLedger()
        investors = ["alice", "bob", "carol", "dave"]

        for _ in range(200):
            investor = rng.choice(investors)
            if rng.random() < 0.6:
                ledger.record_deposit(investor, rng.randint(0, 10**6), rng.randint(0, 10**6))
            elif ledger.read_position(investor).is_empty:
                with pytest.raises(NoShares):
                    ledger.clear_position(investor)
            else:
                ledger.clear_position(investor)
                assert ledger.read_position(investor).is_empty
            ledger.verify()
