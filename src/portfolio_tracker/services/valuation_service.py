"""Valuation service: combines derived positions with market data."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.views import (
    HistoricalPoint,
    PortfolioHistory,
    PortfolioSummary,
    PortfolioValuation,
    Position,
    PositionView,
)
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.position_calculator import (
    DEFAULT_EPSILON,
    calculate_positions,
    sort_chronologically,
)
from portfolio_tracker.services.sync_coordinator import SyncCoordinator

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class ValuationService:
    """
    Values the active account's positions.

    Each fetch is tagged with the coordinator epoch at the time it starts. If
    the snapshot changes (account switch, edit, reload) while quotes are in
    flight, the result is stale and is discarded: the call returns None.
    """

    def __init__(
        self,
        coordinator: SyncCoordinator,
        market_data_service: MarketDataService,
        epsilon: Decimal = DEFAULT_EPSILON,
    ):
        self._coordinator = coordinator
        self._market = market_data_service
        self._epsilon = epsilon

    def active_positions(self) -> list[Position]:
        """Derived positions of the active account, replayed in date order."""
        snapshot = self._coordinator.require_snapshot()
        if snapshot.active_account_id is None:
            return []
        transactions = sort_chronologically(snapshot.transactions_for(snapshot.active_account_id))
        return calculate_positions(transactions, epsilon=self._epsilon)

    async def value_active_account(self) -> Optional[PortfolioValuation]:
        """Positions with quotes and summary totals, or None if the result went stale."""
        epoch = self._coordinator.epoch
        snapshot = self._coordinator.require_snapshot()
        account = snapshot.active_account
        if account is None:
            return None

        positions = self.active_positions()
        batch = await self._market.get_quotes([p.ticker for p in positions])

        if self._coordinator.epoch != epoch:
            logger.debug(f"Discarding stale valuation for account {account.id} (epoch {epoch})")
            return None

        views: list[PositionView] = []
        summary = PortfolioSummary(trading_cash=account.cash_balance)
        for position in positions:
            quote = batch.quotes.get(position.ticker)
            view = PositionView(
                ticker=position.ticker,
                company_name=position.company_name,
                shares=position.shares,
                average_cost=position.average_cost,
            )
            if quote is not None:
                market_value = position.shares * quote.price
                view.current_price = quote.price
                view.market_value = market_value.quantize(CENT)
                view.gain_loss = (market_value - position.cost_basis).quantize(CENT)
                view.volume = quote.volume
                view.day_high = quote.day_high
                view.day_low = quote.day_low
                view.previous_close = quote.previous_close
                if not view.company_name:
                    view.company_name = quote.company_name
                # Unpriced positions stay out of the totals
                summary.total_market_value += market_value
                summary.total_cost_basis += position.cost_basis
            views.append(view)

        summary.total_gain_loss = summary.total_market_value - summary.total_cost_basis
        if summary.total_cost_basis != 0:
            summary.total_gain_loss_percent = (
                summary.total_gain_loss / summary.total_cost_basis * 100
            ).quantize(CENT)
        summary.total_market_value = summary.total_market_value.quantize(CENT)
        summary.total_cost_basis = summary.total_cost_basis.quantize(CENT)
        summary.total_gain_loss = summary.total_gain_loss.quantize(CENT)

        return PortfolioValuation(
            account_id=account.id,
            epoch=epoch,
            positions=views,
            summary=summary,
            is_degraded=batch.is_degraded,
            degraded_tickers=batch.degraded_tickers,
            as_of=now_eastern(),
        )

    async def portfolio_history(self, days: int) -> Optional[PortfolioHistory]:
        """
        Daily value of current holdings over the last `days` days.

        Uses today's share counts for every day. Tickers whose history failed
        are left out of the totals; they and any fallback series are reported
        in degraded_tickers. Returns None if the result went stale while
        histories were in flight.
        """
        epoch = self._coordinator.epoch
        positions = self.active_positions()
        if not positions:
            return PortfolioHistory(epoch=epoch)

        shares_by_ticker = {p.ticker: p.shares for p in positions}
        series, failed = await self._market.get_histories(list(shares_by_ticker), days)

        if self._coordinator.epoch != epoch:
            logger.debug(f"Discarding stale portfolio history (epoch {epoch})")
            return None

        totals: dict = defaultdict(lambda: Decimal("0"))
        for ticker, history in series.items():
            shares = shares_by_ticker[ticker]
            for point in history.data:
                totals[point.date] += point.price * shares

        fallback = [ticker for ticker, history in series.items() if history.is_fallback]
        degraded = sorted(set(fallback) | set(failed))
        if degraded:
            logger.warning(f"Degraded history data for: {', '.join(degraded)}")

        return PortfolioHistory(
            epoch=epoch,
            points=[
                HistoricalPoint(date=day, value=value.quantize(CENT))
                for day, value in sorted(totals.items())
            ],
            is_degraded=bool(degraded),
            degraded_tickers=degraded,
        )
