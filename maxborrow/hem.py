"""Household Expenditure Measure (HEM) benchmark lookups.

The benchmark is the minimum living expense assumed for a household of a
given size and income in a given region. Declared expenses below the
benchmark are replaced by it for serviceability.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import pandas as pd

from .calculators import safe_number
from .models import ExpenseComparison, HemResult
from .presets import HEM_DEFAULT_WEEKLY, HEM_MAX_DEPENDENTS, HEM_METRO_LOCATION_ID

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


@lru_cache()
def load_hem_table() -> pd.DataFrame:
    """Benchmark weekly values keyed by location, status, dependents and income band."""
    return pd.read_csv(
        DATA_DIR / "hem_lookup.csv",
        dtype={"marital_status": str},
    )


@lru_cache()
def load_postcode_map() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "hem_postcodes.csv", dtype={"postcode": str})


@lru_cache()
def load_income_ranges() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "hem_income_ranges.csv").sort_values("income_range_id")


def _normalize_postcode(postcode) -> str:
    text = str(postcode or "").strip()
    return text.zfill(4) if text.isdigit() else text


def get_hem_location_id(postcode) -> int:
    """Region id for ``postcode``; unknown postcodes use the metropolitan id."""
    mapping = load_postcode_map()
    hits = mapping.loc[mapping["postcode"] == _normalize_postcode(postcode), "hem_location_id"]
    if hits.empty:
        return HEM_METRO_LOCATION_ID
    return int(hits.iloc[0])


def get_income_range_id(income) -> int:
    """Income band (1-14) for annual gross ``income``.

    The first band whose upper edge is at or above the income wins, so zero
    and negative income fall in band 1 and the top band is open ended.
    """

    value = safe_number(income)
    ranges = load_income_ranges()
    for row in ranges.itertuples(index=False):
        upper = safe_number(row.amount_to, default=float("inf"))
        if value <= upper:
            return int(row.income_range_id)
    return int(ranges["income_range_id"].max())


def _nearest_income_match(rows: pd.DataFrame, income_range_id: int) -> Optional[pd.Series]:
    # Closest band at or below the request, else the lowest band on file
    if rows.empty:
        return None
    below = rows[rows["income_range_id"] <= income_range_id]
    if not below.empty:
        return below.sort_values("income_range_id").iloc[-1]
    return rows.sort_values("income_range_id").iloc[0]


def get_hem_value(
    postcode,
    gross_income,
    marital_status: str = "single",
    dependents=0,
    table: Optional[pd.DataFrame] = None,
    logger: Optional[logging.Logger] = None,
) -> HemResult:
    """Resolve the benchmark for a household.

    Lookup order when the exact key is missing: the same household in the
    nearest income band, the metropolitan region with the same keys, the
    metropolitan region in the nearest income band, and finally a fixed
    default for the marital status.
    """

    logger = logger or log
    hem = load_hem_table() if table is None else table

    status = str(marital_status or "single").lower()
    if status not in HEM_DEFAULT_WEEKLY:
        status = "single"
    deps = min(max(int(safe_number(dependents)), 0), HEM_MAX_DEPENDENTS)
    location_id = get_hem_location_id(postcode)
    income_range_id = get_income_range_id(gross_income)

    def result(weekly, loc, band, source):
        weekly = float(weekly)
        return HemResult(
            weekly_value=weekly,
            annual_value=weekly * 52,
            location_id=int(loc),
            income_range_id=int(band),
            marital_status=status,
            dependents=deps,
            source=source,
        )

    household = hem[(hem["marital_status"] == status) & (hem["dependents"] == deps)]
    local = household[household["hem_location_id"] == location_id]

    exact = local[local["income_range_id"] == income_range_id]
    if not exact.empty:
        return result(exact["weekly_value"].iloc[0], location_id, income_range_id, "exact")

    nearest = _nearest_income_match(local, income_range_id)
    if nearest is not None:
        logger.debug(
            "HEM: no band %s for location %s, using band %s",
            income_range_id,
            location_id,
            nearest["income_range_id"],
        )
        return result(nearest["weekly_value"], location_id, nearest["income_range_id"], "nearest_income")

    metro = household[household["hem_location_id"] == HEM_METRO_LOCATION_ID]
    metro_exact = metro[metro["income_range_id"] == income_range_id]
    if not metro_exact.empty:
        logger.debug("HEM: no data for location %s, using metropolitan values", location_id)
        return result(metro_exact["weekly_value"].iloc[0], HEM_METRO_LOCATION_ID, income_range_id, "metro")

    metro_nearest = _nearest_income_match(metro, income_range_id)
    if metro_nearest is not None:
        logger.debug("HEM: using metropolitan band %s", metro_nearest["income_range_id"])
        return result(
            metro_nearest["weekly_value"],
            HEM_METRO_LOCATION_ID,
            metro_nearest["income_range_id"],
            "metro_nearest_income",
        )

    logger.warning("HEM: no benchmark for %s/%s dependents, using default", status, deps)
    return result(HEM_DEFAULT_WEEKLY[status], location_id, income_range_id, "default")


def get_higher_of_declared_or_hem(
    declared_annual,
    postcode,
    gross_income,
    marital_status: str = "single",
    dependents=0,
    table: Optional[pd.DataFrame] = None,
    logger: Optional[logging.Logger] = None,
) -> ExpenseComparison:
    """Return the larger of declared annual expenses and the benchmark.

    A tie keeps the declared figure (``is_hem`` is False).
    """

    declared = max(safe_number(declared_annual), 0.0)
    hem = get_hem_value(postcode, gross_income, marital_status, dependents, table=table, logger=logger)
    is_hem = hem.annual_value > declared
    return ExpenseComparison(
        amount=hem.annual_value if is_hem else declared,
        is_hem=is_hem,
        hem_amount=hem.annual_value,
    )
