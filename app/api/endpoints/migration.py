from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional
import hmac
import logging
import time

from app.api.deps import get_firestore_service, get_pacer, get_settings, get_shopify_service
from app.core.config import Settings
from app.models.product import MigrationResponse
from app.services.firestore_service import FirestoreService
from app.services.migration_service import MigrationService
from app.services.pacing import FixedIntervalPacer
from app.services.shopify_service import ShopifyService

logger = logging.getLogger(__name__)

router = APIRouter()


def _secret_matches(provided: Optional[str], expected: str) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@router.api_route("/migrate-products",
                  methods=["GET", "POST"],
                  response_model=MigrationResponse,
                  summary="Migrate Firestore products to Shopify",
                  description="Creates a Shopify product (plus metafields) for every Firestore product document "
                              "that has no shopifyId yet and writes the Shopify id back onto the document.")
async def migrate_products(
    secret: Optional[str] = Query(None, description="Shared migration secret"),
    app_settings: Settings = Depends(get_settings),
    store: FirestoreService = Depends(get_firestore_service),
    shopify_service: ShopifyService = Depends(get_shopify_service),
    pacer: FixedIntervalPacer = Depends(get_pacer),
):
    """
    Run the one-shot product migration.

    Returns 401 on a missing/invalid secret or when no Shopify session can be
    established, 500 on setup failures, and 200 with per-record results once
    every document has been visited. Individual record failures never abort
    the run; they are listed in ``results`` with status ``failed``.
    """
    if not _secret_matches(secret, app_settings.migration_secret):
        logger.warning("Migration request rejected: missing or invalid secret")
        return JSONResponse(status_code=401, content={"error": "Unauthorized - missing or invalid secret"})

    start_time = time.time()
    try:
        session = await shopify_service.authenticate()
        if not session:
            return JSONResponse(status_code=401, content={"error": "No Shopify session. Install app and re-open."})

        store.connect()
        service = MigrationService(
            store,
            shopify_service,
            pacer=pacer,
            batch_size=app_settings.migration_batch_size,
        )
        report = await service.run()
    except Exception as e:
        logger.error(f"Migration error: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return MigrationResponse(
        success=True,
        migrated=report.migrated,
        skipped=report.skipped,
        failed=report.failed,
        execution_time=time.time() - start_time,
        results=report.results,
    )
