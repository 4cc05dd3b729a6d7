from pydantic import BaseModel
from typing import List, Optional


class ShopifyVariant(BaseModel):
    price: str
    sku: Optional[str] = None
    inventory_management: Optional[str] = "shopify"
    inventory_quantity: Optional[int] = None
    compare_at_price: Optional[str] = None


class ShopifyImage(BaseModel):
    src: str


class ShopifyMetafield(BaseModel):
    namespace: str
    key: str
    value: str
    type: str
    owner_resource: str = "product"
    owner_id: Optional[int] = None


class ShopifyProduct(BaseModel):
    title: str
    body_html: str = ""
    vendor: str
    product_type: str = ""
    tags: List[str] = []
    variants: List[ShopifyVariant]
    images: List[ShopifyImage] = []


class ShopifyProductWrapper(BaseModel):
    product: ShopifyProduct


class ShopifySession(BaseModel):
    shop: str
    access_token: str
    api_version: str
