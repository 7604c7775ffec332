# File: freshlink/api/deps.py

from functools import lru_cache

from fastapi import Depends

from freshlink.core.config import get_settings
from freshlink.db.profile_store import ProfileStore
from freshlink.db.user_store import UserStore
from freshlink.services.ai_client import build_ai_client
from freshlink.services.dashboard_service import DashboardService
from freshlink.services.insight_service import InsightGenerator


@lru_cache
def get_user_store() -> UserStore:
    """
    FastAPI dependency that provides the account table.

    Usage in route functions:
        users: UserStore = Depends(get_user_store)
    """
    return UserStore(get_settings().data_dir)


@lru_cache
def get_profile_store() -> ProfileStore:
    return ProfileStore(get_settings().data_dir)


@lru_cache
def get_insight_generator() -> InsightGenerator:
    return InsightGenerator(build_ai_client(get_settings()))


def get_dashboard_service(
    profiles: ProfileStore = Depends(get_profile_store),
    insights: InsightGenerator = Depends(get_insight_generator),
) -> DashboardService:
    return DashboardService(profiles, insights)
