import logging

import pandas as pd
import pytest

from models.subscription import Category, Recurrence
from services.export_service import ExportService
from tests.factories import make_subscription


@pytest.fixture
def subscriptions():
    return [
        make_subscription(name="Netflix", amount=15.99),
        make_subscription(name="Bus pass", amount=10, recurrence=Recurrence.WEEKLY,
                          category=Category.TRANSPORT, description="commute"),
    ]


def test_export_csv(subscriptions):
    frame = pd.read_csv(ExportService().export_csv(subscriptions), encoding="utf-8-sig")

    assert list(frame["Name"]) == ["Netflix", "Bus pass"]
    assert list(frame["Monthly Equivalent"]) == [15.99, 43.33]
    assert frame.loc[1, "Description"] == "commute"


def test_export_csv_with_no_subscriptions_keeps_header():
    frame = pd.read_csv(ExportService().export_csv([]), encoding="utf-8-sig")
    assert "Monthly Equivalent" in frame.columns
    assert frame.empty


def test_export_excel_has_category_summary(subscriptions):
    sheets = pd.read_excel(ExportService().export_excel(subscriptions), sheet_name=None)

    assert set(sheets) == {"Subscriptions", "By Category"}
    summary = sheets["By Category"].set_index("Category")["Monthly Total"]
    assert len(summary) == len(Category)
    assert summary["Transport"] == pytest.approx(43.33)
    assert summary["Rent"] == 0


def test_corrupt_record_is_left_out_of_every_sheet(subscriptions, caplog):
    subscriptions[0].recurrence = "Daily"

    with caplog.at_level(logging.ERROR):
        sheets = pd.read_excel(ExportService().export_excel(subscriptions), sheet_name=None)
        frame = pd.read_csv(ExportService().export_csv(subscriptions), encoding="utf-8-sig")

    assert list(sheets["Subscriptions"]["Name"]) == ["Bus pass"]
    assert list(frame["Name"]) == ["Bus pass"]
    assert sheets["By Category"].set_index("Category")["Monthly Total"]["Entertainment"] == 0
    assert "Skipping subscription" in caplog.text
