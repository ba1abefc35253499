"""
FastAPI dependency providers.

The settings object and the database pool are created once in create_app()
and kept on app.state; services are assembled per request from them.
Tests replace the service providers through app.dependency_overrides.
"""

from fastapi import Depends, Request

from memoreel.config import Settings
from memoreel.db.pool import DatabasePoolManager
from memoreel.repositories.reel_repository import PostgresReelRepository
from memoreel.repositories.user_repository import PostgresUserRepository
from memoreel.repositories.video_repository import PostgresVideoRepository
from memoreel.services.reel_service import ReelService
from memoreel.services.user_service import UserService
from memoreel.services.video_service import VideoService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> DatabasePoolManager:
    return request.app.state.db


def get_reel_service(db: DatabasePoolManager = Depends(get_db)) -> ReelService:
    return ReelService(
        reels=PostgresReelRepository(db),
        videos=PostgresVideoRepository(db),
        users=PostgresUserRepository(db),
    )


def get_user_service(db: DatabasePoolManager = Depends(get_db)) -> UserService:
    return UserService(users=PostgresUserRepository(db), reels=PostgresReelRepository(db))


def get_video_service(db: DatabasePoolManager = Depends(get_db)) -> VideoService:
    return VideoService(videos=PostgresVideoRepository(db))
