"""
Fundraising Tracker Service

This module provides:
- User accounts with a public view that never carries the credential
- An append-only donation ledger kept in sync with per-user totals
- Leaderboard rank, milestone rewards and population analytics
- A FastAPI adapter mapping service errors to HTTP status codes
"""

from .models import (
    Donation,
    PublicUser,
    RankedUser,
    UserRecord,
)
from .service import (
    AuthenticationError,
    ConflictError,
    FundraiserError,
    FundraiserService,
    InternalError,
    NotFoundError,
    ValidationError,
)
from .storage import InMemoryStorage

__all__ = [
    "Donation",
    "PublicUser",
    "RankedUser",
    "UserRecord",
    "AuthenticationError",
    "ConflictError",
    "FundraiserError",
    "FundraiserService",
    "InternalError",
    "NotFoundError",
    "ValidationError",
    "InMemoryStorage",
]
