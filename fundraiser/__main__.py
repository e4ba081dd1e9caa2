"""Run the API with uvicorn: python -m fundraiser"""
import logging

import uvicorn

from fundraiser.config import settings

ENDPOINTS = (
    "POST /api/auth/login",
    "POST /api/auth/signup",
    "GET  /api/users/:id",
    "GET  /api/users/:id/stats",
    "GET  /api/users/:id/rewards",
    "GET  /api/users/:id/donations",
    "GET  /api/rewards",
    "GET  /api/leaderboard",
    "GET  /api/leaderboard/top/:limit",
    "GET  /api/donations",
    "POST /api/donations",
    "GET  /api/analytics/overview",
    "GET  /api/health",
)

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)


def run() -> None:
    from fundraiser.api import app

    logger.info("%s backend running on port %s", settings.APP_NAME, settings.PORT)
    logger.info("API base URL: http://localhost:%s/api", settings.PORT)
    logger.info("Available endpoints:\n   %s", "\n   ".join(ENDPOINTS))
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
