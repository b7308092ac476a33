"""
Fund Coordinator — Внешний контракт фонда

Оркестрация операций:
- deposit: allow-list → разделение суммы → 2× Conversion Gateway → Ledger → событие
- withdraw: Ledger → Pool Holdings → 2× Proration Engine → Ledger → переводы → событие
- invest: административное перераспределение Pool Holdings (Ledger не меняется)

ПОРЯДОК И АТОМАРНОСТЬ:
1. Позиция обнуляется в Ledger строго до любых внешних переводов
2. Повторный вход в любую операцию во время выполнения → ReentrantCall
3. Любое исключение откатывает Ledger и (для TransactionalCustody) custody
4. События эмитируются только после фиксации операции
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from src.core.domain.events import DepositEvent, FundEvent, WithdrawEvent
from src.core.domain.position import Balances
from src.core.errors import InvalidAmount, NoFunds, NoShares, ReentrantCall, UnsupportedAsset
from src.core.math.integer_safeguards import split_in_half, validate_uint
from src.core.math.proration import Entitlement, compute_entitlement
from src.fund.allowlist import AssetAllowList
from src.fund.config import FundConfig
from src.fund.custody import AssetCustody, TransactionalCustody
from src.fund.gateway import ConversionGateway
from src.fund.ledger import PositionLedger

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[FundEvent], None]


class FundCoordinator:
    """
    Пул двух активов с пропорциональным распределением прибыли и убытка.

    Операции выполняются последовательно; между вызовами Ledger всегда
    удовлетворяет инварианту Total == Σ Position.
    """

    def __init__(
        self,
        config: FundConfig,
        custody: AssetCustody,
        gateway: ConversionGateway,
        allow_list: Optional[AssetAllowList] = None,
        ledger: Optional[PositionLedger] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: параметры фонда
            custody: хранилище активов (источник Pool Holdings)
            gateway: Conversion Gateway для депозитов
            allow_list: допустимые входные активы (default: из config)
            ledger: учёт долей (default: пустой)
            clock: источник времени для deadline swap
        """
        self.config = config
        self.custody = custody
        self.gateway = gateway
        self.allow_list = allow_list or AssetAllowList(config.supported_assets)
        self.ledger = ledger or PositionLedger()
        self.clock = clock

        self._in_operation = False
        self._events: List[FundEvent] = []
        self._subscribers: List[EventSubscriber] = []

    # =========================================================================
    # ОПЕРАЦИИ ИНВЕСТОРА
    # =========================================================================

    def deposit(self, investor: str, input_asset: str, amount_in: int) -> bool:
        """
        Депозит входного актива.

        Сумма делится пополам (нечётный остаток остаётся в фонде), каждая
        половина конвертируется в актив A и B соответственно.

        Args:
            investor: идентификатор инвестора (источник средств)
            input_asset: входной актив из allow-list
            amount_in: входная сумма (требуется allowance для фонда)

        Returns:
            True при успехе

        Raises:
            UnsupportedAsset: актив не в allow-list
            InvalidAmount: amount_in // 2 == 0
            TransferFailed: недостаточный баланс или allowance инвестора
            ConversionFailed: gateway отклонил swap
        """
        with self._operation("deposit"):
            if not self.allow_list.is_supported(input_asset):
                raise UnsupportedAsset(f"Fund: Invalid token provided: {input_asset}")
            validate_uint(amount_in, "amount_in")
            half = split_in_half(amount_in)
            if half == 0:
                raise InvalidAmount(f"Fund: Invalid amount provided: {amount_in}")

            fund = self.config.fund_address
            self.custody.transfer_from(input_asset, fund, investor, fund, amount_in)

            amount_a = self._convert(input_asset, half, self.config.asset_a)
            amount_b = self._convert(input_asset, half, self.config.asset_b)

            self.ledger.record_deposit(investor, amount_a, amount_b)
            event = DepositEvent(
                investor=investor,
                input_asset=input_asset,
                amount_in=amount_in,
                amount_out_a=amount_a,
                amount_out_b=amount_b,
            )

        logger.info(
            "Deposit investor=%s asset=%s amount_in=%d -> (%d, %d)",
            investor,
            input_asset,
            amount_in,
            amount_a,
            amount_b,
        )
        self._emit(event)
        return True

    def withdraw(self, investor: str) -> bool:
        """
        Полный вывод позиции инвестора.

        Инвестор получает amount_out - fee по каждому активу,
        получатель комиссии получает fee. Нулевые переводы пропускаются.

        Returns:
            True при успехе

        Raises:
            NoFunds: Total пуст по обоим активам
            NoShares: позиция инвестора пуста
            TransferFailed: custody отклонила перевод
        """
        with self._operation("withdraw"):
            total = self.ledger.read_total()
            if total.is_empty:
                raise NoFunds("Fund: No funds")
            position = self.ledger.read_position(investor)
            if position.is_empty:
                raise NoShares("Fund: No shares")

            holdings = self.pool_holdings()
            entitlement_a = self._entitlement(
                holdings.balance_a, total.balance_a, position.balance_a
            )
            entitlement_b = self._entitlement(
                holdings.balance_b, total.balance_b, position.balance_b
            )

            # Позиция обнуляется до переводов: повторный вход видит пустую позицию
            self.ledger.clear_position(investor)

            self._pay_out(self.config.asset_a, investor, entitlement_a)
            self._pay_out(self.config.asset_b, investor, entitlement_b)

            event = WithdrawEvent(
                investor=investor,
                amount_out_a=entitlement_a.amount_out,
                amount_out_b=entitlement_b.amount_out,
                fee_a=entitlement_a.fee,
                fee_b=entitlement_b.fee,
            )

        logger.info(
            "Withdraw investor=%s out=(%d, %d) fee=(%d, %d)",
            investor,
            entitlement_a.amount_out,
            entitlement_b.amount_out,
            entitlement_a.fee,
            entitlement_b.fee,
        )
        self._emit(event)
        return True

    # =========================================================================
    # АДМИНИСТРАТИВНЫЕ ОПЕРАЦИИ
    # =========================================================================

    def invest(self, amount_a: int, amount_b: int) -> bool:
        """
        Перевод части Pool Holdings на адрес owner.

        Ledger не изменяется, поэтому Pool Holdings опускаются ниже Total
        (нереализованный убыток для всех инвесторов).

        Raises:
            TransferFailed: в пуле недостаточно средств
        """
        with self._operation("invest"):
            validate_uint(amount_a, "amount_a")
            validate_uint(amount_b, "amount_b")
            fund = self.config.fund_address
            if amount_a:
                self.custody.transfer(self.config.asset_a, fund, self.config.owner, amount_a)
            if amount_b:
                self.custody.transfer(self.config.asset_b, fund, self.config.owner, amount_b)

        logger.info("Invest to %s: (%d, %d)", self.config.owner, amount_a, amount_b)
        return True

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    def position_of(self, investor: str) -> Balances:
        return self.ledger.read_position(investor)

    def total(self) -> Balances:
        return self.ledger.read_total()

    def pool_holdings(self) -> Balances:
        """Фактические балансы активов A и B фонда в custody."""
        fund = self.config.fund_address
        return Balances(
            balance_a=self.custody.balance_of(self.config.asset_a, fund),
            balance_b=self.custody.balance_of(self.config.asset_b, fund),
        )

    @property
    def events(self) -> Tuple[FundEvent, ...]:
        return tuple(self._events)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        self._subscribers.append(subscriber)

    # =========================================================================
    # ВНУТРЕННИЕ ШАГИ
    # =========================================================================

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """
        Guard повторного входа и атомарный откат операции.

        Raises:
            ReentrantCall: если другая операция ещё выполняется
        """
        if self._in_operation:
            raise ReentrantCall(f"Fund: reentrant call to {name}")

        self._in_operation = True
        ledger_state = self.ledger.snapshot()
        custody_state = None
        if isinstance(self.custody, TransactionalCustody):
            custody_state = self.custody.snapshot()

        try:
            yield
        except Exception as e:
            self.ledger.restore(ledger_state)
            if custody_state is not None:
                self.custody.restore(custody_state)
            logger.warning("%s aborted: %s: %s", name, type(e).__name__, e)
            raise
        finally:
            self._in_operation = False

    def _convert(self, input_asset: str, amount_in: int, target_asset: str) -> int:
        """Конвертация половины депозита в целевой актив."""
        if input_asset == target_asset:
            return amount_in

        min_amount_out = self.gateway.quote(input_asset, amount_in, target_asset)
        deadline = self.clock() + self.config.swap_deadline_sec
        return self.gateway.swap(
            input_asset,
            amount_in,
            target_asset,
            min_amount_out,
            deadline,
            self.config.fund_address,
        )

    def _entitlement(self, pool_balance: int, total_claims: int, investor_claim: int) -> Entitlement:
        # Нулевая доля по одному активу при ненулевой по другому
        if investor_claim == 0:
            return Entitlement(amount_out=0, fee=0)
        return compute_entitlement(
            pool_balance,
            total_claims,
            investor_claim,
            fee_percent=self.config.protocol_fee_percent,
        )

    def _pay_out(self, asset: str, investor: str, entitlement: Entitlement) -> None:
        fund = self.config.fund_address
        if entitlement.net_amount:
            self.custody.transfer(asset, fund, investor, entitlement.net_amount)
        if entitlement.fee:
            self.custody.transfer(asset, fund, self.config.fee_to, entitlement.fee)

    def _emit(self, event: FundEvent) -> None:
        """
        Доставка события подписчикам после фиксации операции.

        Ошибка подписчика логируется и не прерывает доставку остальным:
        операция к этому моменту уже зафиксирована.
        """
        self._events.append(event)
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception("%s subscriber %r failed", event.event, subscriber)
