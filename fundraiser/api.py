import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware

from scoring import RewardsEvaluator, load_catalog

from .config import settings
from .models import (
    AnalyticsOverview, AuthResponse, CreateDonationRequest, Donation, DonationReceipt,
    DonationWithIntern, HealthStatus, LoginRequest, RankedUser, RewardTierModel,
    SignupRequest, UserReward, UserStats,
)
from .service import (
    AuthenticationError, ConflictError, FundraiserService, InternalError,
    NotFoundError, ValidationError,
)

STARTED_AT = time.monotonic()


def build_service() -> FundraiserService:
    catalog = load_catalog(settings.REWARD_CATALOG_PATH) if settings.REWARD_CATALOG_PATH else None
    service = FundraiserService(
        rewards=RewardsEvaluator(catalog),
        recent_donations=settings.RECENT_DONATIONS_LIMIT,
    )
    if settings.SEED_DEMO_DATA:
        service.seed_demo_data()
    return service


fundraiser_service = build_service()


def get_service() -> FundraiserService:
    return fundraiser_service


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Fundraising tracker: accounts, donations, leaderboard rank and milestone rewards",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _not_found(user_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")


@app.post("/api/auth/login", response_model=AuthResponse, tags=["Auth"])
def login(request: LoginRequest, service: FundraiserService = Depends(get_service)) -> AuthResponse:
    try:
        return service.login(request.email, request.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@app.post("/api/auth/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, tags=["Auth"])
def signup(request: SignupRequest, service: FundraiserService = Depends(get_service)) -> AuthResponse:
    try:
        return service.signup(request.name, request.email, request.password, request.school)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@app.get("/api/users/{user_id}", response_model=RankedUser, tags=["Users"])
def get_user(user_id: int, service: FundraiserService = Depends(get_service)) -> RankedUser:
    try:
        return service.find_user(user_id)
    except NotFoundError:
        raise _not_found(user_id)


@app.get("/api/users/{user_id}/stats", response_model=UserStats, tags=["Users"])
def get_user_stats(user_id: int, service: FundraiserService = Depends(get_service)) -> UserStats:
    try:
        return service.user_stats(user_id)
    except NotFoundError:
        raise _not_found(user_id)


@app.get("/api/users/{user_id}/rewards", response_model=list[UserReward], tags=["Rewards"])
def get_user_rewards(user_id: int, service: FundraiserService = Depends(get_service)) -> list[UserReward]:
    try:
        return service.user_rewards(user_id)
    except NotFoundError:
        raise _not_found(user_id)


@app.get("/api/users/{user_id}/donations", response_model=list[Donation], tags=["Donations"])
def get_user_donations(user_id: int, service: FundraiserService = Depends(get_service)) -> list[Donation]:
    return service.user_donations(user_id)


@app.get("/api/rewards", response_model=list[RewardTierModel], tags=["Rewards"])
def get_rewards(service: FundraiserService = Depends(get_service)) -> list[RewardTierModel]:
    return service.reward_catalog()


@app.get("/api/leaderboard", response_model=list[RankedUser], tags=["Leaderboard"])
def get_leaderboard(limit: Optional[int] = Query(default=None),
                    service: FundraiserService = Depends(get_service)) -> list[RankedUser]:
    try:
        return service.leaderboard(limit)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@app.get("/api/leaderboard/top/{limit}", response_model=list[RankedUser], tags=["Leaderboard"])
def get_leaderboard_top(limit: str, service: FundraiserService = Depends(get_service)) -> list[RankedUser]:
    try:
        parsed = int(limit)
    except ValueError:
        parsed = 0
    if parsed < 1:
        parsed = settings.LEADERBOARD_DEFAULT_LIMIT
    return service.leaderboard(parsed)


@app.get("/api/donations", response_model=list[DonationWithIntern], tags=["Donations"])
def get_donations(service: FundraiserService = Depends(get_service)) -> list[DonationWithIntern]:
    return service.all_donations()


@app.post("/api/donations", response_model=DonationReceipt, status_code=status.HTTP_201_CREATED, tags=["Donations"])
def create_donation(request: CreateDonationRequest,
                    service: FundraiserService = Depends(get_service)) -> DonationReceipt:
    try:
        return service.submit_donation(request.user_id, request.amount, request.donor_name)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@app.get("/api/analytics/overview", response_model=AnalyticsOverview, tags=["Analytics"])
def get_analytics_overview(service: FundraiserService = Depends(get_service)) -> AnalyticsOverview:
    return service.analytics_overview()


@app.get("/api/health", response_model=HealthStatus, tags=["System"])
def health_check(service: FundraiserService = Depends(get_service)) -> HealthStatus:
    try:
        service.verify_ledger()
    except InternalError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return HealthStatus(timestamp=datetime.now(timezone.utc), uptime=time.monotonic() - STARTED_AT)
