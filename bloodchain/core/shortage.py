"""
Blood shortage risk scoring

Scores are coarse buckets derived from days of supply and the ratio of the
current stock to the location's minimum threshold.
"""

from decimal import Decimal

HIGH_RISK = 0.8
MEDIUM_RISK = 0.5
LOW_RISK = 0.2

# Risk scores are stored with four decimal places
RISK_QUANTUM = Decimal("0.0001")


def calculate_shortage_risk(current_stock: int, average_consumption: float, minimum_threshold: int) -> float:
    """
    Estimate the shortage risk for a single blood type at a location.

    Args:
        current_stock: Units currently in stock
        average_consumption: Average units consumed per day (0 is treated as 1)
        minimum_threshold: Minimum stock the location should hold (0 disables the ratio check)

    Returns:
        0.8 (high), 0.5 (medium) or 0.2 (low)
    """
    days_of_supply = current_stock / (average_consumption or 1)
    threshold_ratio = current_stock / minimum_threshold if minimum_threshold > 0 else float("inf")

    if days_of_supply < 3 or threshold_ratio < 0.5:
        return HIGH_RISK
    elif days_of_supply < 7 or threshold_ratio < 0.8:
        return MEDIUM_RISK
    return LOW_RISK


def format_risk(risk: float) -> str:
    """Format a risk score as a four-place decimal string"""
    return str(Decimal(str(risk)).quantize(RISK_QUANTUM))


def recommended_stock(current_stock: int, minimum_threshold: int) -> int:
    """Units to order so the stock reaches twice the minimum threshold"""
    return max(0, 2 * minimum_threshold - current_stock)
