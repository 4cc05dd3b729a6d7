import logging
from typing import Any, List, Optional

from app.core.config import settings
from app.models.product import SourceRecord
from app.models.shopify import (
    ShopifyImage,
    ShopifyMetafield,
    ShopifyProduct,
    ShopifyProductWrapper,
    ShopifyVariant,
)
from app.utils.helpers import format_number, is_finite_number, to_text

logger = logging.getLogger(__name__)

# (source attribute, metafield key, metafield type)
METAFIELD_MAPPING = (
    ('brand', 'brand', 'single_line_text_field'),
    ('suppdate', 'suppdate', 'single_line_text_field'),
    ('suppinvo', 'suppinvo', 'single_line_text_field'),
    ('value', 'value', 'number_integer'),
)


class ProductService:
    def __init__(self, namespace: Optional[str] = None):
        self.namespace = namespace or settings.metafield_namespace

    def build_product(self, record: SourceRecord) -> ShopifyProductWrapper:
        """Map a Firestore product document onto a Shopify REST product payload"""
        if record.rate is None:
            raise ValueError("Missing required field 'rate' for variant price")

        variant = ShopifyVariant(
            price=format_number(record.rate),
            sku=to_text(record.barcode) if record.barcode else None,
            inventory_management="shopify",
            inventory_quantity=_inventory_quantity(record.stock),
            compare_at_price=to_text(record.mrp) if record.mrp else None,
        )

        product = ShopifyProduct(
            title=to_text(record.name) if record.name else "Untitled Product",
            body_html="",
            vendor=to_text(record.supplier) if record.supplier else "Unknown",
            product_type=to_text(record.group) if record.group else "",
            tags=[to_text(record.sub_category)] if record.sub_category else [],
            variants=[variant],
            images=[ShopifyImage(src=url) for url in record.images],
        )
        return ShopifyProductWrapper(product=product)

    def build_metafields(self, record: SourceRecord, product_id: int) -> List[ShopifyMetafield]:
        """Metafields for every mapped source value that is present and non-empty"""
        metafields = []
        for attr, key, mf_type in METAFIELD_MAPPING:
            value = getattr(record, attr)
            if not value:
                continue
            metafields.append(ShopifyMetafield(
                namespace=self.namespace,
                key=key,
                type=mf_type,
                value=to_text(value),
                owner_resource="product",
                owner_id=product_id,
            ))
        return metafields


def _inventory_quantity(stock: Any) -> Optional[int]:
    # Only whole, finite numbers; strings, booleans and fractions are left out
    if not is_finite_number(stock) or not float(stock).is_integer():
        return None
    return int(stock)
