"""
services/subscription_service.py
--------------------------------
Session state for one user's subscriptions.
Holds the in-memory collection and keeps it in step with the repository.
"""

from copy import deepcopy
from datetime import datetime
from typing import Callable, Optional

from errors import BillPilotError, NotFoundError, RemoteFailure, ValidationError
from models.subscription import Subscription
from models.user import UserProfile
from repositories.base import BaseSubscriptionRepository
from services.billing import advance_due_date, roll_to_next_cycle
from utils.logger import get_logger
from utils.validators import validate_subscription_changes, validate_subscription_form

logger = get_logger(__name__)


class SubscriptionService:
    """
    Explicit state container for a single user session.

    Responsibilities:
        - Load the user's subscriptions from the repository.
        - Validate form input for create/update.
        - Apply create, update, delete and mark-as-paid.

    Every mutation goes to the repository first. The in-memory collection
    changes only after the repository call returns, so a failed write
    (RemoteFailure) leaves local state exactly as it was.
    """

    def __init__(self, repo: BaseSubscriptionRepository, user_id: str,
                 user: Optional[UserProfile] = None):
        self.repo = repo
        self.user_id = user_id
        self.user = user
        self.last_error: Optional[str] = None
        self._subscriptions: list[Subscription] = []

    @property
    def subscriptions(self) -> list[Subscription]:
        """Copies of the collection in insertion order."""
        return deepcopy(self._subscriptions)

    def set_user(self, user: Optional[UserProfile]) -> None:
        self.user = user

    def clear_error(self) -> None:
        self.last_error = None

    # ── READ ──────────────────────────────────────────────

    def load(self) -> list[Subscription]:
        """Replace the collection with the repository's current contents."""
        subscriptions = self._remote("Fetch subscriptions", self.repo.get_all, self.user_id)
        self._subscriptions = list(subscriptions)
        logger.info(f"Loaded {len(self._subscriptions)} subscriptions for user {self.user_id}")
        return self.subscriptions

    def get(self, subscription_id: str) -> Subscription:
        """A copy; changes go through update() or mark_as_paid()."""
        return deepcopy(self._subscriptions[self._index_of(subscription_id)])

    # ── MUTATIONS ─────────────────────────────────────────

    def create(self, form: dict, now: Optional[datetime] = None) -> Subscription:
        """
        Validate form input and persist a new subscription.

        Args:
            form: Raw field values (see utils.validators).
            now: Creation timestamp; defaults to the current time.

        Returns:
            The stored Subscription, with its id assigned.

        Raises:
            ValidationError: Invalid input; nothing is stored.
            RemoteFailure: The repository failed; nothing is stored.
        """
        data = validate_subscription_form(form)
        if "next_due_date" not in data:
            data["next_due_date"] = advance_due_date(data["start_date"], data["recurrence"])

        draft = Subscription(**data, user_id=self.user_id, created_at=now or datetime.now())
        saved = self._remote("Create subscription", self.repo.add, self.user_id, draft)
        self._subscriptions.append(saved)
        logger.info(f"Created subscription '{saved.name}' #{saved.id} for user {self.user_id}")
        return deepcopy(saved)

    def update(self, subscription_id: str, changes: dict) -> Subscription:
        """
        Merge a partial update into an existing subscription.

        A changed category recomputes the color. A changed amount records the
        old amount as `previous_amount` unless the caller supplies one.
        """
        current = self.get(subscription_id)
        cleaned = validate_subscription_changes(changes)

        if "category" in cleaned:
            cleaned["color"] = cleaned["category"].color
        if (
            "amount" in cleaned
            and "previous_amount" not in cleaned
            and cleaned["amount"] != current.amount
        ):
            cleaned["previous_amount"] = current.amount
        if cleaned.get("is_free_trial", current.is_free_trial) and \
                cleaned.get("trial_end_date", current.trial_end_date) is None:
            raise ValidationError(
                "trial_end_date is required for a free trial", field="trial_end_date"
            )

        saved = self._remote("Update subscription", self.repo.update, subscription_id, cleaned)
        self._subscriptions[self._index_of(subscription_id)] = saved
        logger.info(f"Updated subscription #{subscription_id}: {sorted(cleaned)}")
        return deepcopy(saved)

    def delete(self, subscription_id: str) -> None:
        self.get(subscription_id)
        self._remote("Delete subscription", self.repo.delete, subscription_id)
        del self._subscriptions[self._index_of(subscription_id)]
        logger.info(f"Deleted subscription #{subscription_id}")

    def mark_as_paid(self, subscription_id: str) -> Subscription:
        """
        Record a payment: the due date advances one billing period and
        the new cycle starts unpaid.
        """
        current = self.get(subscription_id)
        changes = roll_to_next_cycle(current)
        saved = self._remote("Mark as paid", self.repo.update, subscription_id, changes)
        self._subscriptions[self._index_of(subscription_id)] = saved
        logger.info(
            f"Marked '{saved.name}' paid; next due {saved.next_due_date}"
        )
        return deepcopy(saved)

    # ── HELPERS ───────────────────────────────────────────

    def _index_of(self, subscription_id: str) -> int:
        for index, subscription in enumerate(self._subscriptions):
            if subscription.id == subscription_id:
                return index
        raise NotFoundError(subscription_id)

    def _remote(self, action: str, call: Callable, *args):
        """Run a repository call; foreign exceptions become RemoteFailure."""
        try:
            result = call(*args)
        except BillPilotError as e:
            self.last_error = str(e)
            raise
        except Exception as e:
            self.last_error = f"{action} failed"
            logger.error(f"{action} failed for user {self.user_id}: {e}")
            raise RemoteFailure(f"{action} failed") from e
        self.last_error = None
        return result
