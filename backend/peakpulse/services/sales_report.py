"""
Sales Report Service
====================
Aggregates order rows for the accounting screens: headline totals, a
per-day revenue series and a per-payment-method split.

Revenue is ``total_amount`` in the store currency. "Paid" revenue only
counts orders whose ``payment_status`` is ``Paid``; cash-on-delivery
orders stay out of it until someone marks them paid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

logger = logging.getLogger(__name__)

PAID_STATUS = "Paid"


@dataclass
class SalesSummary:
    order_count: int = 0
    gross_revenue: float = 0.0
    paid_revenue: float = 0.0
    daily: list[dict] = field(default_factory=list)
    by_payment_method: list[dict] = field(default_factory=list)


def summarise_orders(orders: list[dict]) -> SalesSummary:
    """Build a SalesSummary from raw ``orders`` rows."""
    if not orders:
        return SalesSummary()

    df = pd.DataFrame(orders)
    for column in ("total_amount", "payment_status", "payment_method", "created_at"):
        if column not in df:
            df[column] = None

    df["total_amount"] = pd.to_numeric(df["total_amount"], errors="coerce").fillna(0.0)
    df["payment_method"] = df["payment_method"].fillna("unknown")
    df["is_paid"] = df["payment_status"] == PAID_STATUS
    df["paid_amount"] = df["total_amount"].where(df["is_paid"], 0.0)

    created = pd.to_datetime(df["created_at"], utc=True, errors="coerce", format="ISO8601")
    df["day"] = created.dt.strftime("%Y-%m-%d")

    daily = (
        df.dropna(subset=["day"])
        .groupby("day")
        .agg(
            order_count=("total_amount", "size"),
            gross_revenue=("total_amount", "sum"),
            paid_revenue=("paid_amount", "sum"),
        )
        .reset_index()
        .sort_values("day")
    )

    by_method = (
        df.groupby("payment_method")
        .agg(
            order_count=("total_amount", "size"),
            gross_revenue=("total_amount", "sum"),
        )
        .reset_index()
        .sort_values("gross_revenue", ascending=False)
    )

    return SalesSummary(
        order_count=int(len(df)),
        gross_revenue=round(float(df["total_amount"].sum()), 2),
        paid_revenue=round(float(df["paid_amount"].sum()), 2),
        daily=_records(daily),
        by_payment_method=_records(by_method),
    )


def _records(frame: pd.DataFrame) -> list[dict]:
    records = []
    for row in frame.to_dict(orient="records"):
        record = dict(row)
        record["order_count"] = int(record["order_count"])
        for key in ("gross_revenue", "paid_revenue"):
            if key in record:
                record[key] = round(float(record[key]), 2)
        records.append(record)
    return records
