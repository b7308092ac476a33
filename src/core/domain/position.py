"""
Balances — Модель доли по двум активам фонда

Immutable Pydantic модель пары беззнаковых сумм (balance_a, balance_b)
в наименьших единицах целевых активов A и B.

Используется и как позиция инвестора (Position), и как агрегат пула (Total).
Все изменения создают новый экземпляр.
"""

from pydantic import BaseModel, Field

from src.core.errors import LedgerCorruption
from src.core.math.integer_safeguards import UINT256_MAX


class Balances(BaseModel):
    """
    Доля по активам A и B.

    Immutable модель (frozen=True): Ledger заменяет записи целиком,
    что исключает частичное обновление одного из полей.
    """

    balance_a: int = Field(default=0, ge=0, le=UINT256_MAX, description="Доля актива A")
    balance_b: int = Field(default=0, ge=0, le=UINT256_MAX, description="Доля актива B")

    # strict: bool и float не принимаются как суммы
    model_config = {"frozen": True, "strict": True}

    @classmethod
    def zero(cls) -> "Balances":
        """Пустая доля."""
        return cls(balance_a=0, balance_b=0)

    @property
    def is_empty(self) -> bool:
        """True если обе суммы равны нулю."""
        return self.balance_a == 0 and self.balance_b == 0

    def plus(self, amount_a: int, amount_b: int) -> "Balances":
        """Новая доля, увеличенная на (amount_a, amount_b)."""
        return Balances(
            balance_a=self.balance_a + amount_a,
            balance_b=self.balance_b + amount_b,
        )

    def minus(self, other: "Balances") -> "Balances":
        """
        Новая доля, уменьшенная на other.

        Raises:
            LedgerCorruption: Если other превышает текущую долю по любому активу
        """
        if other.balance_a > self.balance_a or other.balance_b > self.balance_b:
            raise LedgerCorruption(f"balances underflow: {self!r} - {other!r}")
        return Balances(
            balance_a=self.balance_a - other.balance_a,
            balance_b=self.balance_b - other.balance_b,
        )
