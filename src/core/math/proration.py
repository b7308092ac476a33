"""
Proration Engine — Расчёт выплаты и комиссии инвестора

Чистая функция, вызываемая один раз на каждый актив при выводе средств.
Активы A и B обрабатываются независимо: прибыль по A и убыток по B
в одном выводе учитываются каждый со своим результатом по комиссии.

АЛГОРИТМ:
    position = floor(investor_claim * 100 / total_claims)

    pool_balance == total_claims  → amount_out = investor_claim, fee = 0
    pool_balance >  total_claims  → profit_share = floor((pool - total) * position / 100)
                                    amount_out = investor_claim + profit_share
                                    fee = floor(profit_share * fee_percent / 100)
    pool_balance <  total_claims  → amount_out = floor(pool * position / 100), fee = 0

Комиссия берётся только с доли прибыли, но не с основной суммы.
Вычитание комиссии из amount_out выполняет вызывающая сторона.

ОГРАНИЧЕНИЕ ТОЧНОСТИ:
    position усекается до целого процента. Для позиций, не попадающих
    точно в целый процент, выплата меньше точной пропорции.
"""

from typing import Final, NamedTuple

from src.core.errors import LedgerCorruption, NoFunds, NoShares
from src.core.math.integer_safeguards import (
    PERCENT_DENOMINATOR,
    mul_div_floor,
    percent_of,
    validate_percent,
    validate_uint,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Комиссия протокола в целых процентах от доли прибыли
PROTOCOL_FEE_PERCENT: Final[int] = 10


# =============================================================================
# RESULT TYPE
# =============================================================================


class Entitlement(NamedTuple):
    """Результат пропорционального расчёта для одного актива."""

    amount_out: int
    fee: int

    @property
    def net_amount(self) -> int:
        """Сумма, фактически переводимая инвестору."""
        return self.amount_out - self.fee


# =============================================================================
# ENGINE
# =============================================================================


def position_percent(total_claims: int, investor_claim: int) -> int:
    """
    Доля инвестора в целых процентах от суммы всех долей.

    Args:
        total_claims: Сумма долей всех инвесторов (> 0)
        investor_claim: Доля инвестора

    Returns:
        floor(investor_claim * 100 / total_claims), в диапазоне [0, 100]
    """
    return percent_of(investor_claim, total_claims)


def compute_entitlement(
    pool_balance: int,
    total_claims: int,
    investor_claim: int,
    fee_percent: int = PROTOCOL_FEE_PERCENT,
) -> Entitlement:
    """
    Расчёт выплаты и комиссии инвестора по одному активу.

    Args:
        pool_balance: Фактический баланс актива в пуле
        total_claims: Total по активу (сумма всех позиций)
        investor_claim: Позиция инвестора по активу
        fee_percent: Комиссия протокола в процентах (default: 10)

    Returns:
        Entitlement(amount_out, fee)

    Raises:
        NoFunds: Если total_claims == 0
        NoShares: Если investor_claim == 0
        LedgerCorruption: Если investor_claim > total_claims
        ValueError: Если аргументы не являются беззнаковыми целыми
    """
    validate_uint(pool_balance, "pool_balance")
    validate_uint(total_claims, "total_claims")
    validate_uint(investor_claim, "investor_claim")
    validate_percent(fee_percent, "fee_percent")

    if total_claims == 0:
        raise NoFunds("Fund: No funds")
    if investor_claim == 0:
        raise NoShares("Fund: No shares")
    if investor_claim > total_claims:
        raise LedgerCorruption(
            f"investor claim {investor_claim} exceeds total claims {total_claims}"
        )

    position = position_percent(total_claims, investor_claim)

    if pool_balance == total_claims:
        return Entitlement(amount_out=investor_claim, fee=0)

    if pool_balance > total_claims:
        profit = pool_balance - total_claims
        profit_share = mul_div_floor(profit, position, PERCENT_DENOMINATOR)
        fee = mul_div_floor(profit_share, fee_percent, PERCENT_DENOMINATOR)
        return Entitlement(amount_out=investor_claim + profit_share, fee=fee)

    # Убыток: инвестор несёт свою долю, комиссия не взимается
    return Entitlement(
        amount_out=mul_div_floor(pool_balance, position, PERCENT_DENOMINATOR),
        fee=0,
    )
