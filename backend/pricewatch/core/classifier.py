"""Moving-average deviation signal: BUY below the band, SELL above it."""

from __future__ import annotations

from .models import Action, Holding, ProfitEstimate, Signal

SELL_RECOMMENDATION = "** SELL **"
BUY_RECOMMENDATION = "** BUY **"


def percent_change(current_price: float, moving_average: float | None) -> float | None:
    """Relative deviation of the price from the average, in percent.

    None when the average is missing or zero.
    """
    if not moving_average:
        return None
    return (current_price - moving_average) / moving_average * 100


def classify(
    current_price: float,
    moving_average: float | None,
    change_threshold_pct: float,
    holding: Holding | None = None,
    fee_pct: float = 0.0,
) -> Signal:
    """Classify the current price against its moving average.

    SELL when the price is more than ``change_threshold_pct`` percent above the
    average, BUY when it is more than that below it, HOLD otherwise. Both
    comparisons are strict, so a threshold of 0 leaves no HOLD band.

    A missing or zero average yields HOLD with zero change. When the signal is
    SELL and a ``holding`` is given, the profit of selling it is attached.
    """
    change = percent_change(current_price, moving_average)
    if change is None:
        return Signal(
            action=Action.HOLD,
            current_price=current_price,
            moving_average=0.0,
            percent_change=0.0,
        )

    if change > change_threshold_pct:
        profit = estimate_profit(holding, current_price, fee_pct) if holding else None
        return Signal(
            action=Action.SELL,
            current_price=current_price,
            moving_average=moving_average,
            percent_change=change,
            recommendation=SELL_RECOMMENDATION,
            profit=profit,
        )
    if change < -change_threshold_pct:
        return Signal(
            action=Action.BUY,
            current_price=current_price,
            moving_average=moving_average,
            percent_change=change,
            recommendation=BUY_RECOMMENDATION,
        )
    return Signal(
        action=Action.HOLD,
        current_price=current_price,
        moving_average=moving_average,
        percent_change=change,
    )


def estimate_profit(holding: Holding, current_price: float, fee_pct: float) -> ProfitEstimate:
    """Profit from selling ``holding`` at ``current_price``.

    The fee is charged as a percentage of the original purchase value.
    """
    buy_value = holding.amount * holding.buy_price
    fee = buy_value * fee_pct / 100
    sell_value = holding.amount * current_price - fee
    return ProfitEstimate(
        amount=holding.amount,
        buy_value=buy_value,
        fee=fee,
        sell_value=sell_value,
        profit=sell_value - buy_value,
    )
