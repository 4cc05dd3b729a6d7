import logging
from typing import Any, Dict, List, Optional

from app.models.product import MigrationReport, RecordResult, RecordStatus, SourceRecord
from app.services.firestore_service import FirestoreService
from app.services.pacing import FixedIntervalPacer
from app.services.product_service import ProductService
from app.services.shopify_service import ShopifyService
from app.utils.helpers import utc_timestamp

logger = logging.getLogger(__name__)


class MigrationService:
    """Moves unmigrated Firestore product documents into Shopify.

    Records are processed strictly one after another. A document that already
    carries a ``shopifyId`` is skipped, so re-running picks up only what failed
    or was never attempted.
    """

    def __init__(self, store: FirestoreService, shopify: ShopifyService,
                 pacer: Optional[FixedIntervalPacer] = None,
                 product_service: Optional[ProductService] = None,
                 batch_size: int = 10):
        if batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        self.store = store
        self.shopify = shopify
        self.pacer = pacer or FixedIntervalPacer()
        self.product_service = product_service or ProductService()
        self.batch_size = batch_size

    async def run(self) -> MigrationReport:
        docs = self.store.fetch_products()
        report = MigrationReport(total_records=len(docs))

        for i in range(0, len(docs), self.batch_size):
            batch = docs[i:i + self.batch_size]
            report.batches += 1
            logger.info(f"Processing batch {i // self.batch_size + 1}: {len(batch)} records")

            for record_id, data in batch:
                result = await self.migrate_record(record_id, data)
                report.add(result)
                if result.status != RecordStatus.SKIPPED:
                    await self.pacer.after_record()

            if i + self.batch_size < len(docs):
                await self.pacer.after_batch()

        logger.info(
            f"Migration finished: {report.migrated} migrated, {report.skipped} skipped, "
            f"{report.failed} failed of {report.total_records}"
        )
        return report

    async def migrate_record(self, record_id: str, data: Dict[str, Any]) -> RecordResult:
        existing = data.get('shopifyId')
        if existing:
            logger.info(f"Skipping {record_id} already migrated to {existing}")
            return RecordResult(record_id=record_id, status=RecordStatus.SKIPPED,
                                shopify_id=_as_int(existing))

        try:
            record = SourceRecord.model_validate(data)
            payload = self.product_service.build_product(record)
            shopify_id = await self.shopify.create_product(payload)
            metafield_errors = await self._create_metafields(record_id, record, shopify_id)
            migrated_at = utc_timestamp()
            self.store.mark_migrated(record_id, shopify_id, migrated_at)
        except Exception as e:
            logger.error(f"Error migrating doc {record_id}: {str(e)}")
            return RecordResult(record_id=record_id, status=RecordStatus.FAILED, error=str(e))

        logger.info(f"Migrated Firebase {record_id} -> Shopify {shopify_id}")
        return RecordResult(
            record_id=record_id,
            status=RecordStatus.PARTIAL if metafield_errors else RecordStatus.MIGRATED,
            shopify_id=shopify_id,
            migrated_at=migrated_at,
            metafield_errors=metafield_errors,
        )

    async def _create_metafields(self, record_id: str, record: SourceRecord, shopify_id: int) -> List[str]:
        # The product already exists; a failed metafield must not leave it unmarked
        errors = []
        for metafield in self.product_service.build_metafields(record, shopify_id):
            try:
                await self.shopify.create_metafield(metafield)
            except Exception as e:
                logger.warning(f"Metafield {metafield.key} failed for doc {record_id} (product {shopify_id}): {str(e)}")
                errors.append(f"{metafield.key}: {str(e)}")
            await self.pacer.after_metafield()
        return errors


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
