"""
Position Ledger — Учёт долей инвесторов и агрегата пула

Единственный писатель Position и Total. Каждая мутация меняет позицию
инвестора и Total в одном шаге, поэтому в любой момент между операциями
выполняется инвариант:

    Total.balance_a == Σ Position.balance_a
    Total.balance_b == Σ Position.balance_b

Позиция создаётся неявно при первом депозите, обнуляется при полном
выводе и никогда не удаляется.
"""

import logging
from typing import Dict, List, Tuple

from src.core.domain.position import Balances
from src.core.errors import LedgerCorruption, NoShares
from src.core.math.integer_safeguards import validate_uint

logger = logging.getLogger(__name__)


class PositionLedger:
    """Позиции инвесторов и Total по активам A и B."""

    def __init__(self):
        self._positions: Dict[str, Balances] = {}
        self._total: Balances = Balances.zero()

    # -------------------------------------------------------------------------
    # Мутаторы (единственный путь записи Position и Total)
    # -------------------------------------------------------------------------

    def record_deposit(self, investor: str, amount_a: int, amount_b: int) -> Balances:
        """
        Зачисление депозита в позицию инвестора и в Total.

        Args:
            investor: Идентификатор инвестора
            amount_a: Сумма актива A
            amount_b: Сумма актива B

        Returns:
            Новая позиция инвестора

        Raises:
            ValueError: Если суммы не являются беззнаковыми целыми
        """
        validate_uint(amount_a, "amount_a")
        validate_uint(amount_b, "amount_b")

        position = self.read_position(investor).plus(amount_a, amount_b)
        total = self._total.plus(amount_a, amount_b)

        # Присваивание только после построения обеих записей
        self._positions[investor] = position
        self._total = total

        logger.debug(
            "record_deposit investor=%s +(%d, %d) position=(%d, %d)",
            investor,
            amount_a,
            amount_b,
            position.balance_a,
            position.balance_b,
        )
        return position

    def clear_position(self, investor: str) -> Balances:
        """
        Обнуление позиции инвестора с уменьшением Total.

        Returns:
            Позиция инвестора до обнуления

        Raises:
            NoShares: Если позиция уже пуста
            LedgerCorruption: Если Total меньше позиции
        """
        position = self.read_position(investor)
        if position.is_empty:
            raise NoShares("Fund: No shares")

        total = self._total.minus(position)

        self._positions[investor] = Balances.zero()
        self._total = total

        logger.debug(
            "clear_position investor=%s -(%d, %d)",
            investor,
            position.balance_a,
            position.balance_b,
        )
        return position

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def read_position(self, investor: str) -> Balances:
        """Позиция инвестора (пустая, если инвестор неизвестен)."""
        return self._positions.get(investor, Balances.zero())

    def read_total(self) -> Balances:
        """Total по активам A и B."""
        return self._total

    def investors(self) -> List[str]:
        """Все инвесторы, когда-либо вносившие депозит."""
        return list(self._positions)

    # -------------------------------------------------------------------------
    # Инвариант и откат
    # -------------------------------------------------------------------------

    def verify(self) -> None:
        """
        Проверка инварианта Total == Σ Position.

        Raises:
            LedgerCorruption: Если Total расходится с суммой позиций
        """
        sum_a = sum(p.balance_a for p in self._positions.values())
        sum_b = sum(p.balance_b for p in self._positions.values())
        if (sum_a, sum_b) != (self._total.balance_a, self._total.balance_b):
            raise LedgerCorruption(
                f"total ({self._total.balance_a}, {self._total.balance_b}) "
                f"!= sum of positions ({sum_a}, {sum_b})"
            )

    def snapshot(self) -> Tuple[Dict[str, Balances], Balances]:
        """Снимок состояния для отката операции (Balances immutable)."""
        return dict(self._positions), self._total

    def restore(self, state: Tuple[Dict[str, Balances], Balances]) -> None:
        """Восстановление состояния из snapshot()."""
        positions, total = state
        self._positions = dict(positions)
        self._total = total
