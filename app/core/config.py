from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Migration trigger
    migration_secret: str = Field("", env="MIGRATION_SECRET")

    # Shopify
    shopify_shop_url: str = Field("", env="SHOPIFY_SHOP_URL")
    shopify_access_token: str = Field("", env="SHOPIFY_ACCESS_TOKEN")
    shopify_api_version: str = Field("2024-10", env="SHOPIFY_API_VERSION")
    metafield_namespace: str = Field("custom", env="METAFIELD_NAMESPACE")

    # Firebase / Firestore
    firebase_service_account_path: Optional[str] = Field(None, env="FIREBASE_SERVICE_ACCOUNT_PATH")
    firebase_service_account_json: Optional[str] = Field(None, env="FIREBASE_SERVICE_ACCOUNT_JSON")
    firebase_collection: str = Field("productCollection", env="FIREBASE_COLLECTION")

    # Pacing (seconds)
    migration_batch_size: int = Field(10, env="MIGRATION_BATCH_SIZE")
    migration_metafield_delay: float = Field(0.2, env="MIGRATION_METAFIELD_DELAY")
    migration_record_delay: float = Field(0.35, env="MIGRATION_RECORD_DELAY")
    migration_batch_delay: float = Field(1.0, env="MIGRATION_BATCH_DELAY")

    # API
    api_host: str = Field("0.0.0.0", env="API_HOST")
    api_port: int = Field(8000, env="API_PORT")
    debug: bool = Field(False, env="DEBUG")

    # App
    app_name: str = Field("Firestore Shopify Migration API", env="APP_NAME")
    version: str = Field("1.0.0", env="VERSION")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
