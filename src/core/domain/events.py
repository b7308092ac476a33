"""
Fund Events — Наблюдаемые события фонда

Immutable Pydantic модели событий Deposit и Withdraw.
Эмитируются ровно один раз на каждую успешную операцию и никогда на
прерванную. Совместимы с JSON Schema (contracts/schema/*_event.json).
"""

from typing import Literal

from pydantic import BaseModel, Field

from src.core.math.integer_safeguards import UINT256_MAX


class DepositEvent(BaseModel):
    """
    Событие депозита.

    amount_out_a / amount_out_b — суммы, фактически полученные от
    Conversion Gateway и зачисленные в позицию.
    """

    event: Literal["Deposit"] = "Deposit"
    investor: str = Field(..., min_length=1, description="Идентификатор инвестора")
    input_asset: str = Field(..., min_length=1, description="Входной актив")
    amount_in: int = Field(..., ge=0, le=UINT256_MAX, description="Входная сумма")
    amount_out_a: int = Field(..., ge=0, le=UINT256_MAX, description="Зачислено актива A")
    amount_out_b: int = Field(..., ge=0, le=UINT256_MAX, description="Зачислено актива B")

    model_config = {"frozen": True}


class WithdrawEvent(BaseModel):
    """
    Событие вывода.

    amount_out_a / amount_out_b — валовые выплаты (до вычета комиссии).
    Инвестор получает amount_out - fee по каждому активу.
    """

    event: Literal["Withdraw"] = "Withdraw"
    investor: str = Field(..., min_length=1, description="Идентификатор инвестора")
    amount_out_a: int = Field(..., ge=0, le=UINT256_MAX, description="Выплата актива A")
    amount_out_b: int = Field(..., ge=0, le=UINT256_MAX, description="Выплата актива B")
    fee_a: int = Field(..., ge=0, le=UINT256_MAX, description="Комиссия по активу A")
    fee_b: int = Field(..., ge=0, le=UINT256_MAX, description="Комиссия по активу B")

    model_config = {"frozen": True}

    @property
    def net_amount_a(self) -> int:
        return self.amount_out_a - self.fee_a

    @property
    def net_amount_b(self) -> int:
        return self.amount_out_b - self.fee_b


FundEvent = DepositEvent | WithdrawEvent
