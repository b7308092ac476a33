"""
Conversion Gateway — Интерфейс внешнего сервиса цен и обмена

Фонд не реализует ценообразование. Перед каждым swap запрашивается quote,
и та же сумма передаётся в swap как минимально допустимый результат
(защита от slippage). Фактически возвращённая сумма считается истинной
и зачисляется в Ledger.

Реализации:
- FixedRateGateway — фиксированный целочисленный курс по парам, резервы в custody
- BestQuoteGateway — выбор лучшей котировки среди нескольких gateway
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from src.core.errors import ConversionFailed
from src.core.math.integer_safeguards import mul_div_floor, validate_uint
from src.fund.custody import AssetCustody

logger = logging.getLogger(__name__)


@runtime_checkable
class ConversionGateway(Protocol):
    """
    Интерфейс Conversion Gateway.

    swap списывает amount_in актива asset_in с баланса recipient и зачисляет
    ему результат в asset_out. deadline: абсолютный unix timestamp,
    ядро его не интерпретирует.
    """

    def quote(self, asset_in: str, amount_in: int, asset_out: str) -> int:
        ...

    def swap(
        self,
        asset_in: str,
        amount_in: int,
        asset_out: str,
        min_amount_out: int,
        deadline: float,
        recipient: str,
    ) -> int:
        ...


# =============================================================================
# FIXED RATE GATEWAY
# =============================================================================


@dataclass(frozen=True)
class Rate:
    """Курс пары: amount_out = floor(amount_in * numerator / denominator)."""

    numerator: int
    denominator: int

    def __post_init__(self):
        validate_uint(self.numerator, "numerator")
        validate_uint(self.denominator, "denominator")
        if self.denominator == 0:
            raise ValueError("rate denominator must be positive")

    def apply(self, amount_in: int) -> int:
        return mul_div_floor(amount_in, self.numerator, self.denominator)


class FixedRateGateway:
    """
    Gateway с фиксированными курсами.

    Резервы выходных активов хранятся в custody на адресе gateway;
    полученные входные активы остаются там же.
    """

    def __init__(
        self,
        custody: AssetCustody,
        address: str = "router",
        rates: Optional[Dict[Tuple[str, str], Rate]] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            custody: custody, в которой хранятся резервы
            address: адрес gateway в custody
            rates: курсы по парам (asset_in, asset_out)
            clock: источник текущего времени для проверки deadline
        """
        self.custody = custody
        self.address = address
        self.clock = clock
        self._rates: Dict[Tuple[str, str], Rate] = dict(rates or {})

    def set_rate(self, asset_in: str, asset_out: str, numerator: int, denominator: int = 1) -> None:
        self._rates[(asset_in, asset_out)] = Rate(numerator, denominator)

    def _rate(self, asset_in: str, asset_out: str) -> Rate:
        rate = self._rates.get((asset_in, asset_out))
        if rate is None:
            raise ConversionFailed(f"no route {asset_in} -> {asset_out}")
        return rate

    def quote(self, asset_in: str, amount_in: int, asset_out: str) -> int:
        validate_uint(amount_in, "amount_in")
        return self._rate(asset_in, asset_out).apply(amount_in)

    def swap(
        self,
        asset_in: str,
        amount_in: int,
        asset_out: str,
        min_amount_out: int,
        deadline: float,
        recipient: str,
    ) -> int:
        """
        Обмен по фиксированному курсу.

        Raises:
            ConversionFailed: Если deadline истёк, результат ниже min_amount_out
                или пара неизвестна
            TransferFailed: Если у recipient или gateway недостаточно средств
        """
        if self.clock() > deadline:
            raise ConversionFailed(f"swap deadline expired: {deadline}")

        amount_out = self.quote(asset_in, amount_in, asset_out)
        if amount_out < min_amount_out:
            raise ConversionFailed(
                f"insufficient output amount: {amount_out} < {min_amount_out}"
            )

        self.custody.transfer(asset_in, recipient, self.address, amount_in)
        self.custody.transfer(asset_out, self.address, recipient, amount_out)
        return amount_out


# =============================================================================
# BEST QUOTE ROUTING
# =============================================================================


class BestQuoteGateway:
    """
    Маршрутизация через gateway с лучшей котировкой.

    Gateway без маршрута для пары пропускаются. При равных котировках
    выбирается первый в порядке регистрации.
    """

    def __init__(self, gateways: Sequence[ConversionGateway]):
        if not gateways:
            raise ValueError("at least one gateway is required")
        self.gateways: List[ConversionGateway] = list(gateways)

    def _best(self, asset_in: str, amount_in: int, asset_out: str) -> Tuple[ConversionGateway, int]:
        best: Optional[Tuple[ConversionGateway, int]] = None
        for gateway in self.gateways:
            try:
                amount_out = gateway.quote(asset_in, amount_in, asset_out)
            except ConversionFailed:
                continue
            if best is None or amount_out > best[1]:
                best = (gateway, amount_out)
        if best is None:
            raise ConversionFailed(f"no route {asset_in} -> {asset_out}")
        logger.debug(
            "best quote %s -> %s: %d via %s", asset_in, asset_out, best[1], type(best[0]).__name__
        )
        return best

    def quote(self, asset_in: str, amount_in: int, asset_out: str) -> int:
        return self._best(asset_in, amount_in, asset_out)[1]

    def swap(
        self,
        asset_in: str,
        amount_in: int,
        asset_out: str,
        min_amount_out: int,
        deadline: float,
        recipient: str,
    ) -> int:
        gateway, _ = self._best(asset_in, amount_in, asset_out)
        return gateway.swap(asset_in, amount_in, asset_out, min_amount_out, deadline, recipient)
