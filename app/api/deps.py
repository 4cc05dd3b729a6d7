from fastapi import Depends

from app.core.config import Settings, settings
from app.services.firestore_service import FirestoreService
from app.services.pacing import FixedIntervalPacer
from app.services.shopify_service import ShopifyService


def get_settings() -> Settings:
    """Dependency for application settings"""
    return settings


def get_firestore_service(app_settings: Settings = Depends(get_settings)) -> FirestoreService:
    """Dependency for the Firestore product store (not connected yet)"""
    return FirestoreService(app_settings)


def get_shopify_service(app_settings: Settings = Depends(get_settings)) -> ShopifyService:
    """Dependency for Shopify service"""
    return ShopifyService(app_settings)


def get_pacer(app_settings: Settings = Depends(get_settings)) -> FixedIntervalPacer:
    """Dependency for the request pacing policy"""
    return FixedIntervalPacer.from_settings(app_settings)
