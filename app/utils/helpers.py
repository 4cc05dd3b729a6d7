import math
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional


def format_number(value: Any) -> str:
    """Render a number the way the storefront expects it: 12.0 -> '12', 12.5 -> '12.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def to_text(value: Any) -> str:
    """Stringify a metafield value; dates and Firestore timestamps become ISO-8601."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_shop_url(shop: Optional[str]) -> str:
    """Accept 'my-shop.myshopify.com' or a full URL and return 'https://my-shop.myshopify.com'."""
    if not shop:
        return ""
    shop = shop.strip().rstrip('/')
    if not shop.startswith(('http://', 'https://')):
        shop = f"https://{shop}"
    return shop


def gid_to_numeric_id(gid: Optional[str]) -> Optional[int]:
    """Convert Shopify GraphQL GID (e.g., gid://shopify/Product/123) to numeric id."""
    if not gid or not isinstance(gid, str):
        return None
    try:
        return int(gid.rsplit('/', 1)[-1])
    except ValueError:
        return None


def extract_product_id(payload: Optional[Dict[str, Any]]) -> Optional[int]:
    """Pull the created product's id out of a create response.

    Handles ``{"product": {...}}``, ``{"body": {"product": {...}}}`` and a bare
    ``{"id": ...}``; ids may be numeric or GraphQL GIDs.
    """
    if not isinstance(payload, dict):
        return None
    product = (payload.get('body') or {}).get('product') if isinstance(payload.get('body'), dict) else None
    product = product or payload.get('product') or payload
    if not isinstance(product, dict):
        return None
    raw_id = product.get('id')
    if raw_id is None:
        return None
    if isinstance(raw_id, str) and raw_id.startswith('gid://'):
        return gid_to_numeric_id(raw_id)
    try:
        return int(raw_id)
    except (TypeError, ValueError):
        return None
