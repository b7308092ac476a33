"""
Integer Safeguards — Безопасная целочисленная арифметика

Модуль обеспечивает детерминированность всех денежных операций фонда:
- Валидация беззнаковых целых (диапазон uint256, запрет bool/float)
- Деление с округлением вниз и защитой от деления на ноль
- Процентные доли в целых процентах

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все суммы: int в диапазоне [0, UINT256_MAX]
2. Любое деление округляется вниз (floor), float никогда не используется
3. Деление на ноль никогда не происходит (ValueError до вычисления)
4. Все операции детерминированы и воспроизводимы
"""

from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Верхняя граница беззнаковой суммы (наименьшие единицы актива)
UINT256_MAX: Final[int] = 2**256 - 1

# Знаменатель для целых процентов
PERCENT_DENOMINATOR: Final[int] = 100


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: object, name: str = "value") -> int:
    """
    Проверка беззнаковой суммы.

    Args:
        value: Проверяемое значение
        name: Имя параметра для сообщения об ошибке

    Returns:
        То же значение (int)

    Raises:
        ValueError: Если значение не int, отрицательное или больше UINT256_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer amount, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"{name} exceeds uint256 range: {value}")
    return value


def validate_percent(value: int, name: str = "percent") -> int:
    """
    Проверка целого процента в диапазоне [0, 100].

    Raises:
        ValueError: Если процент вне диапазона
    """
    validate_uint(value, name)
    if value > PERCENT_DENOMINATOR:
        raise ValueError(f"{name} must be in [0, {PERCENT_DENOMINATOR}], got {value}")
    return value


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def floor_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вниз.

    Args:
        numerator: Числитель (>= 0)
        denominator: Знаменатель (> 0)

    Returns:
        floor(numerator / denominator)

    Raises:
        ValueError: Если denominator == 0
    """
    if denominator == 0:
        raise ValueError("division by zero in floor_div")
    return numerator // denominator


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без промежуточного округления.

    Python int не переполняется, поэтому произведение вычисляется точно.

    Examples:
        >>> mul_div_floor(7, 50, 100)
        3
        >>> mul_div_floor(199, 1, 2)
        99
    """
    return floor_div(a * b, denominator)


def percent_of(part: int, whole: int) -> int:
    """
    Доля part в whole в целых процентах с округлением вниз.

    ВАЖНО: усечение до целого процента ограничивает точность
    (позиция 33.9% считается как 33%).

    Examples:
        >>> percent_of(1, 2)
        50
        >>> percent_of(1, 3)
        33
        >>> percent_of(1, 1000)
        0
    """
    return mul_div_floor(part, PERCENT_DENOMINATOR, whole)


def split_in_half(amount: int) -> int:
    """
    Половина суммы с округлением вниз.

    При нечётной сумме остаток в 1 единицу не распределяется.

    Examples:
        >>> split_in_half(100)
        50
        >>> split_in_half(101)
        50
        >>> split_in_half(1)
        0
    """
    return floor_div(amount, 2)
