"""
repositories/memory_repo.py
---------------------------
Process-local subscription store for offline use and tests.
"""

from copy import deepcopy
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from errors import NotFoundError
from models.subscription import Subscription
from repositories.base import BaseSubscriptionRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class InMemorySubscriptionRepository(BaseSubscriptionRepository):
    """Keeps subscriptions in a dict keyed by id, in insertion order."""

    def __init__(self):
        self._subscriptions: dict[str, Subscription] = {}

    def get_all(self, user_id: str) -> list[Subscription]:
        return [
            deepcopy(s) for s in self._subscriptions.values() if s.user_id == user_id
        ]

    def add(self, user_id: str, subscription: Subscription) -> Subscription:
        stored = replace(deepcopy(subscription), id=str(uuid4()), user_id=user_id)
        self._subscriptions[stored.id] = stored
        logger.info(f"Added subscription '{stored.name}' #{stored.id}")
        return deepcopy(stored)

    def update(self, subscription_id: str, changes: dict) -> Subscription:
        current = self._subscriptions.get(subscription_id)
        if current is None:
            raise NotFoundError(subscription_id)
        stored = replace(current, **deepcopy(changes), updated_at=datetime.now())
        self._subscriptions[subscription_id] = stored
        return deepcopy(stored)

    def delete(self, subscription_id: str) -> None:
        if subscription_id not in self._subscriptions:
            raise NotFoundError(subscription_id)
        del self._subscriptions[subscription_id]
        logger.info(f"Deleted subscription #{subscription_id}")
