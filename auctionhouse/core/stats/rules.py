"""Derived-statistic arithmetic."""


def safe_div(numerator: int, denominator: int) -> int:
    """
    Integer division used for every derived statistic.

    Truncates toward zero and yields 0 when the divisor is 0.
    """
    if denominator == 0:
        return 0
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient
