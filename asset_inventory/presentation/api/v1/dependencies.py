"""API dependencies"""
from fastapi import Depends
from sqlalchemy.orm import Session

from asset_inventory.application.use_cases.asset_use_cases import AssetUseCases
from asset_inventory.application.use_cases.chat_use_cases import ChatUseCases
from asset_inventory.infrastructure.config.settings import settings
from asset_inventory.infrastructure.database.base import get_db
from asset_inventory.infrastructure.llm.client import GeminiClient
from asset_inventory.infrastructure.repositories.asset_repository_db import AssetRepositoryDB


def get_asset_repository(db: Session = Depends(get_db)) -> AssetRepositoryDB:
    """Get asset repository instance with database session"""
    return AssetRepositoryDB(db)


def get_asset_use_cases(db: Session = Depends(get_db)) -> AssetUseCases:
    """Get asset use cases instance with database session"""
    repository = get_asset_repository(db)
    return AssetUseCases(
        repository,
        categories=settings.ASSET_CATEGORIES,
        statuses=settings.ASSET_STATUSES,
        store_timeout=settings.STORE_TIMEOUT_SECONDS,
        default_location=settings.DEFAULT_LOCATION,
        default_assignee=settings.DEFAULT_ASSIGNEE,
    )


def get_chat_use_cases() -> ChatUseCases:
    """Get chat use cases; the hosted model is used only when a key is configured"""
    return ChatUseCases(GeminiClient())
