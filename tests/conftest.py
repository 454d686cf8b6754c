import pytest
from datetime import date

from models.user import UserProfile
from services.subscription_service import SubscriptionService
from tests.factories import USER_ID, FlakyRepository


@pytest.fixture
def repo():
    return FlakyRepository()


@pytest.fixture
def user():
    return UserProfile(id=USER_ID, name="Alex", email="alex@example.com", monthly_budget=500)


@pytest.fixture
def session(repo, user):
    return SubscriptionService(repo, USER_ID, user)


@pytest.fixture
def netflix_form():
    return {
        "name": "Netflix",
        "amount": "15.99",
        "category": "Entertainment",
        "recurrence": "Monthly",
        "start_date": date(2024, 1, 1),
    }
