"""
Тесты для Conversion Gateway

Coverage:
- FixedRateGateway: quote, swap, slippage floor, deadline, неизвестная пара
- Rate: валидация курса
- BestQuoteGateway: выбор лучшей котировки, пропуск gateway без маршрута
"""

import pytest

from src.core.errors import ConversionFailed, TransferFailed
from src.fund.custody import InMemoryCustody
from src.fund.gateway import BestQuoteGateway, ConversionGateway, FixedRateGateway, Rate


@pytest.fixture
def custody():
    custody = InMemoryCustody()
    custody.mint("USDT", "fund", 1_000)
    custody.mint("LINK", "router", 1_000_000)
    custody.mint("LINK", "router2", 1_000_000)
    return custody


@pytest.fixture
def gateway(custody):
    gateway = FixedRateGateway(custody, address="router", clock=lambda: 1_000.0)
    gateway.set_rate("USDT", "LINK", 3)
    return gateway


class TestRate:
    """Тесты курса"""

    def test_apply_floors(self) -> None:
        assert Rate(2, 3).apply(10) == 6

    def test_zero_denominator_rejected(self) -> None:
        with pytest.raises(ValueError, match="denominator"):
            Rate(1, 0)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            Rate(-1, 1)


class TestFixedRateGateway:
    """Тесты FixedRateGateway"""

    def test_quote(self, gateway) -> None:
        assert gateway.quote("USDT", 50, "LINK") == 150

    def test_swap_moves_assets(self, gateway, custody) -> None:
        received = gateway.swap("USDT", 50, "LINK", 150, 1_060.0, "fund")

        assert received == 150
        assert custody.balance_of("LINK", "fund") == 150
        assert custody.balance_of("USDT", "fund") == 950
        assert custody.balance_of("USDT", "router") == 50

    def test_slippage_floor(self, gateway, custody) -> None:
        with pytest.raises(ConversionFailed, match="insufficient output amount"):
            gateway.swap("USDT", 50, "LINK", 151, 1_060.0, "fund")
        assert custody.balance_of("USDT", "fund") == 1_000

    def test_deadline_expired(self, gateway) -> None:
        with pytest.raises(ConversionFailed, match="deadline"):
            gateway.swap("USDT", 50, "LINK", 0, 999.0, "fund")

    def test_unknown_pair(self, gateway) -> None:
        with pytest.raises(ConversionFailed, match="no route"):
            gateway.quote("USDT", 50, "WETH")

    def test_insufficient_reserves(self, custody) -> None:
        gateway = FixedRateGateway(custody, address="empty_router", clock=lambda: 0.0)
        gateway.set_rate("USDT", "LINK", 1)
        with pytest.raises(TransferFailed):
            gateway.swap("USDT", 50, "LINK", 50, 60.0, "fund")

    def test_fractional_rate(self, gateway) -> None:
        gateway.set_rate("USDT", "LINK", 1, 3)
        assert gateway.quote("USDT", 50, "LINK") == 16

    def test_protocol(self, gateway) -> None:
        assert isinstance(gateway, ConversionGateway)


class TestBestQuoteGateway:
    """Тесты BestQuoteGateway"""

    @pytest.fixture
    def routed(self, custody, gateway):
        better = FixedRateGateway(custody, address="router2", clock=lambda: 1_000.0)
        better.set_rate("USDT", "LINK", 4)
        no_route = FixedRateGateway(custody, address="router3", clock=lambda: 1_000.0)
        return BestQuoteGateway([no_route, gateway, better])

    def test_quote_is_best(self, routed) -> None:
        assert routed.quote("USDT", 50, "LINK") == 200

    def test_swap_executes_on_best(self, routed, custody) -> None:
        received = routed.swap("USDT", 50, "LINK", 200, 1_060.0, "fund")

        assert received == 200
        assert custody.balance_of("USDT", "router2") == 50
        assert custody.balance_of("USDT", "router") == 0

    def test_tie_prefers_first(self, custody, gateway) -> None:
        twin = FixedRateGateway(custody, address="router2", clock=lambda: 1_000.0)
        twin.set_rate("USDT", "LINK", 3)
        routed = BestQuoteGateway([gateway, twin])

        routed.swap("USDT", 10, "LINK", 30, 1_060.0, "fund")

        assert custody.balance_of("USDT", "router") == 10

    def test_no_route_anywhere(self, routed) -> None:
        with pytest.raises(ConversionFailed, match="no route"):
            routed.quote("USDT", 50, "WETH")

    def test_requires_gateways(self) -> None:
        with pytest.raises(ValueError):
            BestQuoteGateway([])
