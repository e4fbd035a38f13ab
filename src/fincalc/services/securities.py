"""Bond and option pricing."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from .results import CalculationError

PAR_TOLERANCE = 0.01
MAX_TERM_YEARS = 100
MAX_PAYMENTS_PER_YEAR = 365


def norm_cdf(x: float) -> float:
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def norm_pdf(x: float) -> float:
    return math.exp(-x * x / 2.0) / math.sqrt(2.0 * math.pi)


@dataclass(frozen=True, slots=True)
class BondQuote:
    face: float
    price: float
    coupon_payment: float
    current_yield: float

    @property
    def status(self) -> str:
        """``premium``, ``discount`` or ``par`` relative to face value."""
        if abs(self.price - self.face) < PAR_TOLERANCE:
            return "par"
        return "premium" if self.price > self.face else "discount"

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["status"] = self.status
        return payload


def _periods(years: float, payments_per_year: int) -> int:
    if years > MAX_TERM_YEARS or payments_per_year > MAX_PAYMENTS_PER_YEAR:
        raise CalculationError(
            f"Bonds are limited to {MAX_TERM_YEARS} years and {MAX_PAYMENTS_PER_YEAR} payments a year."
        )
    periods = years * payments_per_year
    if periods < 1 or not float(periods).is_integer():
        raise CalculationError("Years to maturity must cover a whole number of coupon periods.")
    return int(periods)


def bond_price(
    face: float,
    coupon_rate: float,
    years: float,
    market_yield: float,
    payments_per_year: int = 2,
) -> BondQuote:
    """Present value of coupons plus face value, discounted at the market yield."""

    if face <= 0 or coupon_rate < 0 or years <= 0 or market_yield < 0 or payments_per_year <= 0:
        raise CalculationError("Please enter positive values for all fields.")

    periods = _periods(years, payments_per_year)
    coupon = face * coupon_rate / payments_per_year
    periodic_yield = market_yield / payments_per_year
    price = sum(coupon / (1 + periodic_yield) ** t for t in range(1, periods + 1))
    price += face / (1 + periodic_yield) ** periods
    return BondQuote(
        face=face,
        price=price,
        coupon_payment=coupon,
        current_yield=face * coupon_rate / price,
    )


@dataclass(frozen=True, slots=True)
class DurationResult:
    price: float
    macaulay: float
    modified: float
    convexity: float

    def to_dict(self) -> dict:
        return asdict(self)


def duration_convexity(
    face: float,
    coupon_rate: float,
    yield_rate: float,
    years: float,
    payments_per_year: int = 2,
) -> DurationResult:
    """Macaulay and modified duration (years) and convexity of a coupon bond."""

    if face <= 0 or coupon_rate < 0 or yield_rate < 0 or years <= 0 or payments_per_year <= 0:
        raise CalculationError("Please enter positive values for all fields.")

    n = _periods(years, payments_per_year)
    m = payments_per_year
    coupon = face * coupon_rate / m
    per_period = 1 + yield_rate / m

    present_value = 0.0
    weighted_time = 0.0
    weighted_time_sq = 0.0
    for t in range(1, n + 1):
        cash_flow = coupon + (face if t == n else 0.0)
        pv = cash_flow * per_period ** -t
        time_years = t / m
        present_value += pv
        weighted_time += time_years * pv
        weighted_time_sq += time_years * time_years * pv

    macaulay = weighted_time / present_value
    return DurationResult(
        price=present_value,
        macaulay=macaulay,
        modified=macaulay / per_period,
        convexity=weighted_time_sq / present_value / per_period**2,
    )


@dataclass(frozen=True, slots=True)
class OptionQuote:
    call: float
    put: float
    delta_call: float
    delta_put: float
    gamma: float
    vega: float  # per 1 percentage point of volatility
    d1: float
    d2: float

    def to_dict(self) -> dict:
        return asdict(self)


def black_scholes(
    spot: float, strike: float, years: float, risk_free_rate: float, volatility: float
) -> OptionQuote:
    """European call/put prices and basic Greeks under Black-Scholes."""

    if spot <= 0 or strike <= 0 or years <= 0 or volatility <= 0:
        raise CalculationError("Spot price, strike price, time, and volatility must be positive.")

    sqrt_t = math.sqrt(years)
    d1 = (math.log(spot / strike) + (risk_free_rate + volatility**2 / 2) * years) / (
        volatility * sqrt_t
    )
    d2 = d1 - volatility * sqrt_t
    discounted_strike = strike * math.exp(-risk_free_rate * years)

    return OptionQuote(
        call=spot * norm_cdf(d1) - discounted_strike * norm_cdf(d2),
        put=discounted_strike * norm_cdf(-d2) - spot * norm_cdf(-d1),
        delta_call=norm_cdf(d1),
        delta_put=norm_cdf(d1) - 1,
        gamma=norm_pdf(d1) / (spot * volatility * sqrt_t),
        vega=spot * norm_pdf(d1) * sqrt_t / 100,
        d1=d1,
        d2=d2,
    )
