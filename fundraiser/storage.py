import itertools
import threading
from typing import Optional

from .models import Donation, UserRecord


class InMemoryStorage:
    """Users keyed by id in registration order, plus the append-only donation ledger.

    ``lock`` guards every read and write. Mutating callers hold it across their
    whole check-then-write sequence; readers use :meth:`snapshot`.
    """

    def __init__(self):
        self.users: dict[int, dict] = {}
        self.donations: list[dict] = []
        self.email_index: dict[str, int] = {}
        self.lock = threading.RLock()
        self._user_ids = itertools.count(1)
        self._donation_ids = itertools.count(1)

    def next_user_id(self) -> int:
        return next(self._user_ids)

    def next_donation_id(self) -> int:
        return next(self._donation_ids)

    def insert_user(self, user_data: dict) -> dict:
        with self.lock:
            self.users[user_data["id"]] = user_data
            self.email_index[user_data["email"]] = user_data["id"]
            return user_data

    def get_user(self, user_id: int) -> Optional[dict]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[dict]:
        user_id = self.email_index.get(email)
        return self.users.get(user_id) if user_id is not None else None

    def append_donation(self, donation_data: dict) -> dict:
        with self.lock:
            self.donations.append(donation_data)
            return donation_data

    def snapshot(self) -> tuple[list[UserRecord], list[Donation]]:
        with self.lock:
            users = [UserRecord(**u) for u in self.users.values()]
            donations = [Donation(**d) for d in self.donations]
        return users, donations
