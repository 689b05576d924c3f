"""Monthly aggregation of history records."""

from typing import Any, Iterable, List

import pandas as pd

from components.history import schemas
from components.history.models import PAID


def group_by_month(records: Iterable[Any]) -> List[schemas.MonthlyRecord]:
    """
    Total paid amounts per month, newest month first.

    Only paid records count. Each month also carries per-name totals, so a
    cost paid twice in the same month is summed under one key.
    """
    rows = [
        {"name": record.name, "amount": record.amount, "paid_at": record.paid_at}
        for record in records
        if record.status == PAID
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["month"] = pd.to_datetime(df["paid_at"]).dt.strftime("%Y/%m")

    totals = df.groupby("month")["amount"].sum().sort_index(ascending=False)
    by_name = df.groupby(["month", "name"], sort=False)["amount"].sum()

    months = []
    for month, total in totals.items():
        costs = {str(name): int(amount) for name, amount in by_name.loc[month].items()}
        months.append(schemas.MonthlyRecord(month=month, total=int(total), costs=costs))
    return months


def latest_months(records: Iterable[Any], count: int = 6) -> List[schemas.MonthlyRecord]:
    return group_by_month(records)[:count]
