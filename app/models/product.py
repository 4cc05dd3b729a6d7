from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional


class SourceRecord(BaseModel):
    """Product document as stored in the Firestore source collection."""

    # Only rate is typed; every other field is taken as stored and stringified on output
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[Any] = None
    supplier: Optional[Any] = None
    group: Optional[Any] = None
    sub_category: Optional[Any] = Field(None, alias="subCategory")
    rate: Optional[float] = None
    barcode: Optional[Any] = None
    stock: Optional[Any] = None
    mrp: Optional[Any] = None
    images: List[str] = []
    brand: Optional[Any] = None
    suppdate: Optional[Any] = None
    suppinvo: Optional[Any] = None
    value: Optional[Any] = None
    shopify_id: Optional[Any] = Field(None, alias="shopifyId")
    migrated_at: Optional[Any] = Field(None, alias="migratedAt")

    @field_validator("images", mode="before")
    @classmethod
    def _only_url_strings(cls, value: Any) -> List[str]:
        # Anything other than a list of non-empty strings contributes no images
        if not isinstance(value, (list, tuple)):
            return []
        return [url for url in value if isinstance(url, str) and url]


class RecordStatus(str, Enum):
    MIGRATED = "migrated"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    FAILED = "failed"


class RecordResult(BaseModel):
    record_id: str
    status: RecordStatus
    shopify_id: Optional[int] = None
    migrated_at: Optional[str] = None
    error: Optional[str] = None
    metafield_errors: List[str] = []


class MigrationReport(BaseModel):
    total_records: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    batches: int = 0
    results: List[RecordResult] = []

    def add(self, result: RecordResult) -> None:
        self.results.append(result)
        if result.status in (RecordStatus.MIGRATED, RecordStatus.PARTIAL):
            self.migrated += 1
        elif result.status == RecordStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


class MigrationResponse(BaseModel):
    success: bool
    migrated: int
    skipped: int = 0
    failed: int = 0
    execution_time: float = 0.0
    results: List[RecordResult] = []
