"""
Pure money calculators: 50/30/20 split, Philippine freelancer tax, compound growth.

Tax figures follow the TRAIN law (RA 10963) brackets in force from 2023 for
self-employed individuals and freelancers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from moneyglow.gamification.glow import round_half_up

NEEDS_SHARE = 0.5
WANTS_SHARE = 0.3
SAVINGS_SHARE = 0.2


@dataclass(frozen=True)
class BudgetSplit:
    needs: float
    wants: float
    savings: float


def split_budget(income: float, rounded: bool = False) -> BudgetSplit:
    """50/30/20 split. ``rounded`` gives whole pesos, as stored on monthly budgets."""
    needs, wants, savings = income * NEEDS_SHARE, income * WANTS_SHARE, income * SAVINGS_SHARE
    if rounded:
        return BudgetSplit(needs=round_half_up(needs), wants=round_half_up(wants), savings=round_half_up(savings))
    return BudgetSplit(needs=needs, wants=wants, savings=savings)


# ---------------------------------------------------------------------------
# Tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxBracket:
    floor: float
    rate: float
    base: float


# Graduated brackets on taxable income, highest first.
GRADUATED_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(floor=8_000_000, rate=0.35, base=2_202_500),
    TaxBracket(floor=2_000_000, rate=0.30, base=402_500),
    TaxBracket(floor=800_000, rate=0.25, base=102_500),
    TaxBracket(floor=400_000, rate=0.20, base=22_500),
    TaxBracket(floor=250_000, rate=0.15, base=0),
)

OSD_RATE = 0.40
PERCENTAGE_TAX_RATE = 0.03
FLAT_RATE = 0.08
FLAT_EXEMPTION = 250_000
FLAT_ELIGIBILITY_CEILING = 3_000_000


@dataclass(frozen=True)
class GraduatedTax:
    taxable_income: float
    income_tax: float
    percentage_tax: float
    total: float


@dataclass(frozen=True)
class TaxEstimate:
    gross: float
    graduated: GraduatedTax
    flat8: float
    flat8_eligible: bool
    recommended: str
    savings: float


def graduated_income_tax(taxable_income: float) -> float:
    for bracket in GRADUATED_BRACKETS:
        if taxable_income > bracket.floor:
            return bracket.base + (taxable_income - bracket.floor) * bracket.rate
    return 0.0


def graduated_total(gross: float) -> GraduatedTax:
    """Graduated rates on gross less the 40% optional standard deduction, plus 3% percentage tax on gross."""
    taxable = gross * (1 - OSD_RATE)
    income_tax = graduated_income_tax(taxable)
    percentage_tax = gross * PERCENTAGE_TAX_RATE
    return GraduatedTax(
        taxable_income=taxable,
        income_tax=income_tax,
        percentage_tax=percentage_tax,
        total=income_tax + percentage_tax,
    )


def flat8_tax(gross: float) -> float:
    """8% of gross above the first ₱250,000. Replaces both income and percentage tax."""
    return max(0.0, (gross - FLAT_EXEMPTION) * FLAT_RATE)


def estimate_tax(gross: float) -> TaxEstimate:
    """Compare both regimes for an annual gross and recommend the cheaper one the user may elect."""
    graduated = graduated_total(gross)
    flat = flat8_tax(gross)
    eligible = gross <= FLAT_ELIGIBILITY_CEILING
    recommended = "flat8" if eligible and flat <= graduated.total else "graduated"
    other = graduated.total if recommended == "flat8" else flat
    chosen = flat if recommended == "flat8" else graduated.total
    return TaxEstimate(
        gross=gross,
        graduated=graduated,
        flat8=flat,
        flat8_eligible=eligible,
        recommended=recommended,
        savings=max(0.0, other - chosen) if eligible else 0.0,
    )


# ---------------------------------------------------------------------------
# Compound growth
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompoundYear:
    year: int
    deposited: float
    interest: float
    total: float


@dataclass(frozen=True)
class CompoundProjection:
    monthly: float
    years: int
    annual_rate: float
    future_value: float
    total_deposited: float
    interest_earned: float
    breakdown: list[CompoundYear] = field(default_factory=list)


def future_value(monthly: float, annual_rate: float, months: int) -> float:
    """Future value of ``monthly`` deposits at end of each month, compounded monthly."""
    r = annual_rate / 100 / 12
    if r == 0:
        return monthly * months
    return monthly * ((1 + r) ** months - 1) / r


def project_compound(monthly: float, years: int, annual_rate: float) -> CompoundProjection:
    breakdown = []
    for year in range(1, years + 1):
        months = year * 12
        total = future_value(monthly, annual_rate, months)
        deposited = monthly * months
        breakdown.append(CompoundYear(year=year, deposited=deposited, interest=total - deposited, total=total))

    fv = future_value(monthly, annual_rate, years * 12)
    deposited = monthly * years * 12
    return CompoundProjection(
        monthly=monthly,
        years=years,
        annual_rate=annual_rate,
        future_value=fv,
        total_deposited=deposited,
        interest_earned=fv - deposited,
        breakdown=breakdown,
    )
