"""
repositories/base.py
--------------------
Interface every subscription store must implement.
"""

from abc import ABC, abstractmethod

from models.subscription import Subscription


class BaseSubscriptionRepository(ABC):
    """
    Durable storage for one or more users' subscriptions.

    Implementations raise errors.RemoteFailure when the store itself fails
    and errors.NotFoundError when `update`/`delete` target a missing id.
    """

    @abstractmethod
    def get_all(self, user_id: str) -> list[Subscription]:
        """Every subscription owned by `user_id`."""

    @abstractmethod
    def add(self, user_id: str, subscription: Subscription) -> Subscription:
        """Persist a new subscription and return it with its `id` assigned."""

    @abstractmethod
    def update(self, subscription_id: str, changes: dict) -> Subscription:
        """Apply a partial update and return the stored record."""

    @abstractmethod
    def delete(self, subscription_id: str) -> None:
        """Remove a subscription."""
