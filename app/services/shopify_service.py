import httpx
import asyncio
from typing import Dict, Any, Optional
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ShopifyAPIError
from app.models.shopify import ShopifyMetafield, ShopifyProductWrapper, ShopifySession
from app.utils.helpers import extract_product_id, normalize_shop_url
import logging

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 502, 503, 504)


class ShopifyService:
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or default_settings
        self.shop_url = normalize_shop_url(settings.shopify_shop_url)
        self.access_token = settings.shopify_access_token
        self.api_version = settings.shopify_api_version
        self.headers = {
            'Content-Type': 'application/json',
            'X-Shopify-Access-Token': self.access_token
        }
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def _rest_call(self, client: httpx.AsyncClient, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                         max_retries: int = 6) -> httpx.Response:
        """REST call with retry/backoff for 429 and gateway errors.
        Path should be like f"/admin/api/{self.api_version}/..."
        """
        url = f"{self.shop_url}{path}"
        backoff = 0.6
        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            try:
                resp = await client.request(method.upper(), url, headers=self.headers, json=json, timeout=60.0)
            except httpx.ReadTimeout:
                if last_attempt:
                    raise
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, 8)
                continue
            if resp.status_code in RETRY_STATUSES and not last_attempt:
                # Respect Retry-After if present
                retry_after = resp.headers.get('Retry-After')
                try:
                    wait_s = float(retry_after) if retry_after else backoff
                except ValueError:
                    wait_s = backoff
                logger.warning(f"Shopify {method.upper()} {path} returned {resp.status_code}; retrying in {wait_s:.1f}s")
                await asyncio.sleep(wait_s)
                backoff = min(backoff * 2, 8)
                continue
            return resp
        return resp

    async def authenticate(self) -> Optional[ShopifySession]:
        """Resolve an Admin API session, or None when the shop is not reachable with our token"""
        if not self.shop_url or not self.access_token:
            logger.warning("Shopify shop URL or access token not configured")
            return None
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.shop_url}/admin/api/{self.api_version}/shop.json",
                    headers={'X-Shopify-Access-Token': self.access_token},
                    timeout=30.0
                )
        except httpx.HTTPError as e:
            logger.error(f"Shopify session check failed: {str(e)}")
            return None
        if response.status_code != 200:
            logger.error(f"Shopify session check non-200: {response.status_code} - {response.text}")
            return None
        return ShopifySession(shop=self.shop_url, access_token=self.access_token, api_version=self.api_version)

    async def create_product(self, product: ShopifyProductWrapper) -> int:
        """Create a product and return its numeric Shopify id"""
        body = product.model_dump(exclude_none=True)
        async with self._client() as client:
            response = await self._rest_call(client, 'POST', f"/admin/api/{self.api_version}/products.json", json=body)
        if response.status_code not in (200, 201):
            raise ShopifyAPIError(f"Failed to create product '{product.product.title}'",
                                  status_code=response.status_code, body=response.text)
        shopify_id = extract_product_id(response.json())
        if shopify_id is None:
            raise ShopifyAPIError(f"Product create response carried no id: {response.text}")
        return shopify_id

    async def create_metafield(self, metafield: ShopifyMetafield) -> Optional[int]:
        """Create a product metafield, returning the new metafield id"""
        post_body = {"metafield": metafield.model_dump(exclude_none=True)}
        async with self._client() as client:
            response = await self._rest_call(client, 'POST', f"/admin/api/{self.api_version}/metafields.json", json=post_body)
        if response.status_code not in (200, 201):
            raise ShopifyAPIError(f"Failed creating metafield {metafield.namespace}.{metafield.key} for product {metafield.owner_id}",
                                  status_code=response.status_code, body=response.text)
        created = (response.json() or {}).get('metafield') or {}
        return created.get('id')
