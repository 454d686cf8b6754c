"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of a user's subscriptions.
"""

import io
from typing import Iterable

import pandas as pd

from models.subscription import Recurrence, Subscription
from services.analytics_service import monthly_amounts, spending_by_category
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = [
    "Name", "Category", "Recurrence", "Amount", "Monthly Equivalent",
    "Next Due Date", "Paid", "Free Trial", "Description",
]


class ExportService:
    """Builds downloadable subscription reports in CSV and Excel formats."""

    @staticmethod
    def _to_frame(subscriptions: Iterable[Subscription]) -> pd.DataFrame:
        """One row per subscription; corrupt recurrences are logged and left out."""
        rows = [
            {
                "Name": s.name,
                "Category": s.category.value,
                "Recurrence": Recurrence(s.recurrence).value,
                "Amount": s.amount,
                "Monthly Equivalent": round(monthly, 2),
                "Next Due Date": s.next_due_date.isoformat(),
                "Paid": s.is_paid,
                "Free Trial": s.is_free_trial,
                "Description": s.description or "",
            }
            for s, monthly in monthly_amounts(subscriptions)
        ]
        return pd.DataFrame(rows, columns=_COLUMNS)

    def export_csv(self, subscriptions: Iterable[Subscription]) -> io.BytesIO:
        """
        Export subscriptions as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._to_frame(subscriptions)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} subscriptions as CSV")
        return buffer

    def export_excel(self, subscriptions: Iterable[Subscription]) -> io.BytesIO:
        """
        Export subscriptions as an Excel (.xlsx) workbook.

        Sheets:
            Subscriptions: one row per subscription.
            By Category: monthly-equivalent spend for every category.
        """
        subscriptions = list(subscriptions)
        df = self._to_frame(subscriptions)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Subscriptions", index=False)

            summary = pd.DataFrame(
                [
                    {"Category": category.value, "Monthly Total": round(total, 2)}
                    for category, total in spending_by_category(subscriptions).items()
                ]
            )
            summary.to_excel(writer, sheet_name="By Category", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} subscriptions as Excel")
        return buffer
