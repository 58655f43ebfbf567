"""
Plain-text alert and digest messages.

Monetary and percentage values use two decimals, rounded to nearest with
ties to even on the exact binary value.
"""

from ..models import PricePoint


def format_price(value: float) -> str:
    return f"{value:.2f}"


def deviation_message(asset_name: str, price: float, sma: float, deviation: float) -> str:
    direction = "above" if deviation > 0 else "below"
    return (
        f"{asset_name} price (${format_price(price)}) is {direction} "
        f"SMA (${format_price(sma)}) by {format_price(abs(deviation * 100))}%"
    )


def new_high_message(asset_name: str, price: float) -> str:
    return f"New 24H HIGH: {asset_name} reached ${format_price(price)}"


def new_low_message(asset_name: str, price: float) -> str:
    return f"New 24H LOW: {asset_name} reached ${format_price(price)}"


def sma_label(window_seconds: int) -> str:
    if window_seconds % 60 == 0:
        return f"{window_seconds // 60}min SMA"
    return f"{window_seconds}s SMA"


def digest_message(point: PricePoint, sma: float, base_asset: str, window_seconds: int) -> str:
    lines = [
        f"Current Price: ${format_price(point.price)}",
        f"24h High: ${format_price(point.high_24h)}",
        f"24h Low: ${format_price(point.low_24h)}",
        f"24h Volume: {format_price(point.volume_24h)} {base_asset}",
        f"{sma_label(window_seconds)}: ${format_price(sma)}",
    ]
    return "\n".join(lines)
