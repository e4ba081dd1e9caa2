import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from scoring import RankingEngine, RewardsEvaluator, summarize

from .models import (
    AnalyticsOverview,
    AuthResponse,
    Donation,
    DonationReceipt,
    DonationTotals,
    DonationWithIntern,
    PublicUser,
    RankedUser,
    RewardTierModel,
    UserRecord,
    UserReward,
    UserStats,
)
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)

RECENT_DONATIONS = 5


class FundraiserError(Exception):
    pass


class ValidationError(FundraiserError):
    pass


class NotFoundError(FundraiserError):
    pass


class ConflictError(FundraiserError):
    pass


class AuthenticationError(FundraiserError):
    pass


class InternalError(FundraiserError):
    pass


def generate_referral_code(name: str) -> str:
    return name.split(" ")[0].upper() + "2025"


def issue_token(user_id: int) -> str:
    # Opaque placeholder; real token issuance lives outside this service.
    return f"fake-jwt-token-{user_id}"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_user_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid userId: {value!r}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid userId: {value!r}")


def _parse_amount(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except ArithmeticError:
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite() or math.isinf(float(amount)) or amount <= 0:
        raise ValidationError(f"Amount must be a positive number, got {value!r}")
    return amount


class FundraiserService:
    def __init__(
        self,
        storage: Optional[InMemoryStorage] = None,
        rewards: Optional[RewardsEvaluator] = None,
        ranking: Optional[RankingEngine] = None,
        recent_donations: int = RECENT_DONATIONS,
    ):
        self.storage = storage or InMemoryStorage()
        self.rewards = rewards or RewardsEvaluator()
        self.ranking = ranking or RankingEngine()
        self.recent_donations = recent_donations

    # Accounts

    def create_user(self, name: str, email: str, school: str, password: Optional[str] = None) -> PublicUser:
        if _is_blank(name) or _is_blank(email) or _is_blank(school):
            raise ValidationError("name, email and school are required")

        with self.storage.lock:
            if self.storage.get_user_by_email(email):
                raise ConflictError(f"User with email {email} already exists")

            user_data = {
                "id": self.storage.next_user_id(),
                "name": name,
                "email": email,
                "password": password,
                "school": school,
                "referral_code": generate_referral_code(name),
                "total_raised": Decimal("0"),
                "donation_count": 0,
                "created_at": datetime.now(timezone.utc),
            }
            self.storage.insert_user(user_data)

        logger.info("Registered user %s (%s)", user_data["id"], email)
        return UserRecord(**user_data).to_public()

    def signup(self, name: Optional[str], email: Optional[str], password: Optional[str],
               school: Optional[str]) -> AuthResponse:
        if any(_is_blank(v) for v in (name, email, password, school)):
            raise ValidationError("All fields are required")
        user = self.create_user(name, email, school, password=password)
        return AuthResponse(user=user, token=issue_token(user.id))

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResponse:
        if _is_blank(email) or _is_blank(password):
            raise ValidationError("Email and password are required")

        with self.storage.lock:
            user_data = self.storage.get_user_by_email(email)
            record = UserRecord(**user_data) if user_data else None

        if record is None or record.password is None or record.password != password:
            raise AuthenticationError("Invalid credentials")
        return AuthResponse(user=record.to_public(), token=issue_token(record.id))

    def find_user(self, user_id: int) -> RankedUser:
        users, _ = self.storage.snapshot()
        record = self._find(users, user_id)
        rank = self.ranking.rank_of(users, user_id)
        return RankedUser(**record.to_public().model_dump(), rank=rank)

    def user_stats(self, user_id: int) -> UserStats:
        users, donations = self.storage.snapshot()
        record = self._find(users, user_id)
        own = [d for d in donations if d.user_id == user_id]
        recent = own[-self.recent_donations:] if self.recent_donations > 0 else []
        return UserStats(
            total_raised=record.total_raised,
            donation_count=record.donation_count,
            rank=self.ranking.rank_of(users, user_id),
            referral_code=record.referral_code,
            recent_donations=recent,
        )

    # Rewards

    def reward_catalog(self) -> list[RewardTierModel]:
        return [RewardTierModel.model_validate(tier) for tier in self.rewards.catalog]

    def user_rewards(self, user_id: int) -> list[UserReward]:
        users, _ = self.storage.snapshot()
        record = self._find(users, user_id)
        return [
            UserReward(**RewardTierModel.model_validate(tier).model_dump(), unlocked=unlocked)
            for tier, unlocked in self.rewards.rewards_for(record.total_raised)
        ]

    # Leaderboard

    def leaderboard(self, limit: Optional[int] = None) -> list[RankedUser]:
        if limit is not None and limit < 1:
            raise ValidationError(f"limit must be a positive integer, got {limit}")
        users, _ = self.storage.snapshot()
        return [
            RankedUser(**user.to_public().model_dump(), rank=rank)
            for user, rank in self.ranking.ranked(users, limit)
        ]

    # Donations

    def all_donations(self) -> list[DonationWithIntern]:
        users, donations = self.storage.snapshot()
        names = {u.id: u.name for u in users}
        return [
            DonationWithIntern(**d.model_dump(), intern_name=names.get(d.user_id, "Unknown"))
            for d in donations
        ]

    def user_donations(self, user_id: int) -> list[Donation]:
        _, donations = self.storage.snapshot()
        return [d for d in donations if d.user_id == user_id]

    def submit_donation(self, user_id: Any, amount: Any, donor_name: Any,
                        date: Optional[datetime] = None) -> DonationReceipt:
        if _is_blank(user_id) or _is_blank(amount) or _is_blank(donor_name):
            raise ValidationError("userId, amount, and donorName are required")
        if not isinstance(donor_name, str):
            raise ValidationError("donorName must be text")
        parsed_user_id = _parse_user_id(user_id)
        parsed_amount = _parse_amount(amount)

        with self.storage.lock:
            user_data = self.storage.get_user(parsed_user_id)
            if not user_data:
                raise NotFoundError(f"User {parsed_user_id} not found")

            try:
                new_total = user_data["total_raised"] + parsed_amount
            except ArithmeticError:
                raise ValidationError(f"Amount {parsed_amount} overflows the total for user {parsed_user_id}")
            if math.isinf(float(new_total)):
                raise ValidationError(f"Amount {parsed_amount} overflows the total for user {parsed_user_id}")
            new_count = user_data["donation_count"] + 1

            donation_data = {
                "id": self.storage.next_donation_id(),
                "user_id": parsed_user_id,
                "amount": parsed_amount,
                "donor_name": donor_name,
                "date": date or datetime.now(timezone.utc),
            }

            self.storage.append_donation(donation_data)
            user_data["total_raised"] = new_total
            user_data["donation_count"] = new_count

            users, _ = self.storage.snapshot()
            rank = self.ranking.rank_of(users, parsed_user_id)

        logger.info("Recorded donation %s of %s for user %s", donation_data["id"], parsed_amount, parsed_user_id)
        return DonationReceipt(
            donation=Donation(**donation_data),
            new_stats=DonationTotals(total_raised=new_total, donation_count=new_count, rank=rank),
        )

    # Analytics

    def analytics_overview(self) -> AnalyticsOverview:
        users, donations = self.storage.snapshot()
        summary = summarize(users, donations)
        return AnalyticsOverview(
            total_users=summary.total_users,
            total_raised=summary.total_raised,
            total_donations=summary.total_donations,
            average_per_user=summary.average_per_user,
        )

    def verify_ledger(self) -> None:
        users, donations = self.storage.snapshot()
        totals: dict[int, Decimal] = defaultdict(lambda: Decimal("0"))
        counts: dict[int, int] = defaultdict(int)
        for d in donations:
            totals[d.user_id] += d.amount
            counts[d.user_id] += 1

        orphans = set(counts) - {u.id for u in users}
        if orphans:
            logger.error("Ledger references unknown users: %s", sorted(orphans))
            raise InternalError(f"Ledger references unknown users: {sorted(orphans)}")

        for user in users:
            if user.total_raised != totals[user.id] or user.donation_count != counts[user.id]:
                logger.error(
                    "Aggregate mismatch for user %s: stored (%s, %s), ledger (%s, %s)",
                    user.id, user.total_raised, user.donation_count, totals[user.id], counts[user.id],
                )
                raise InternalError(f"Aggregates for user {user.id} do not match the donation ledger")

    # Demo data

    def seed_demo_data(self) -> None:
        """Register the demo fundraisers and their donations through the normal write path.

        Totals are derived from the four demo donations (Alex 350, Mike 300,
        Sarah 175, Emma and David 0), not the larger figures the old dashboard
        mock showed, so aggregates always agree with the ledger.
        """
        for name, email, school in DEMO_USERS:
            self.create_user(name, email, school, password="password123")
        for email, amount, donor_name, date in DEMO_DONATIONS:
            user = self.storage.get_user_by_email(email)
            self.submit_donation(user["id"], amount, donor_name, date=date)
        logger.info("Seeded %d demo users and %d donations", len(DEMO_USERS), len(DEMO_DONATIONS))

    def _find(self, users: list[UserRecord], user_id: int) -> UserRecord:
        for user in users:
            if user.id == user_id:
                return user
        raise NotFoundError(f"User {user_id} not found")


DEMO_USERS = (
    ("Alex Johnson", "alex@email.com", "Stanford University"),
    ("Sarah Chen", "sarah@email.com", "MIT"),
    ("Mike Rodriguez", "mike@email.com", "UC Berkeley"),
    ("Emma Davis", "emma@email.com", "Harvard"),
    ("David Park", "david@email.com", "UCLA"),
)

DEMO_DONATIONS = (
    ("alex@email.com", 150, "John Smith", datetime(2024, 12, 1, tzinfo=timezone.utc)),
    ("alex@email.com", 200, "Jane Doe", datetime(2024, 12, 2, tzinfo=timezone.utc)),
    ("sarah@email.com", 175, "Bob Wilson", datetime(2024, 12, 1, tzinfo=timezone.utc)),
    ("mike@email.com", 300, "Lisa Brown", datetime(2024, 12, 3, tzinfo=timezone.utc)),
)
