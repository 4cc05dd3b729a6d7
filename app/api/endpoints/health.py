from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from app.core.config import settings
from app.services.firestore_service import FirestoreService
from app.services.shopify_service import ShopifyService
from app.api.deps import get_firestore_service, get_shopify_service

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "firestore-shopify-migration",
        "version": settings.version
    }


@router.get("/session", response_class=PlainTextResponse)
async def session_check(
    shopify_service: ShopifyService = Depends(get_shopify_service)
):
    """Report whether a Shopify admin session can be established"""
    session = await shopify_service.authenticate()
    if not session:
        return PlainTextResponse("NO SESSION", status_code=200)
    return PlainTextResponse("SESSION OK", status_code=200)


@router.get("/test-connections")
async def test_connections(
    store: FirestoreService = Depends(get_firestore_service),
    shopify_service: ShopifyService = Depends(get_shopify_service)
):
    """Test Firestore and Shopify connections"""
    results = {}

    results['firestore'] = 'connected' if store.test_connection() else 'failed'

    session = await shopify_service.authenticate()
    results['shopify'] = 'connected' if session else 'failed'

    return results
