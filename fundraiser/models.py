from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal internally, plain JSON number for the dashboard.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PublicUser(CamelModel):
    id: int
    name: str
    email: str
    school: str
    referral_code: str
    total_raised: Money = Decimal("0")
    donation_count: int = 0
    created_at: datetime


class UserRecord(PublicUser):
    """Stored user. The only model that carries the credential."""
    password: Optional[str] = None

    def to_public(self) -> PublicUser:
        return PublicUser(**self.model_dump(exclude={"password"}))


class RankedUser(PublicUser):
    rank: int


class Donation(CamelModel):
    id: int
    user_id: int
    amount: Money
    donor_name: str
    date: datetime


class DonationWithIntern(Donation):
    intern_name: str


class RewardTierModel(CamelModel):
    id: int
    title: str
    description: str
    threshold: Money
    icon: str = ""


class UserReward(RewardTierModel):
    unlocked: bool


class UserStats(CamelModel):
    total_raised: Money
    donation_count: int
    rank: int
    referral_code: str
    recent_donations: list[Donation]


class DonationTotals(CamelModel):
    total_raised: Money
    donation_count: int
    rank: int


class DonationReceipt(CamelModel):
    success: bool = True
    donation: Donation
    new_stats: DonationTotals


class AnalyticsOverview(CamelModel):
    total_users: int
    total_raised: Money
    total_donations: int
    average_per_user: Money


class AuthResponse(CamelModel):
    success: bool = True
    user: PublicUser
    token: str


class HealthStatus(CamelModel):
    status: str = "OK"
    timestamp: datetime
    uptime: float


# Request bodies. Fields are optional so that the service, not the schema,
# decides what counts as missing and reports it as a 400.
class SignupRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    school: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Alex Johnson",
            "email": "alex@email.com",
            "password": "password123",
            "school": "Stanford University"
        }
    })


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CreateDonationRequest(CamelModel):
    user_id: Optional[Union[int, str]] = Field(default=None, description="Fundraiser receiving the donation")
    amount: Optional[Union[int, float, str]] = None
    donor_name: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {"userId": 1, "amount": 150, "donorName": "John Smith"}
    })
