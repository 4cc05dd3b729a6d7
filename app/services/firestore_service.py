from typing import Any, Dict, List, Optional, Tuple
import logging

import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import Settings, settings as default_settings
from app.core.firestore import load_service_account

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "product-migration"


class FirestoreService:
    def __init__(self, settings: Optional[Settings] = None, db: Any = None):
        self.settings = settings or default_settings
        self.collection = self.settings.firebase_collection
        self._db = db

    @property
    def db(self) -> Any:
        if self._db is None:
            raise RuntimeError("FirestoreService is not connected; call connect() first")
        return self._db

    def connect(self) -> None:
        """Initialise the Firebase app from the configured service account and open a client"""
        if self._db is not None:
            return
        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            key = load_service_account(self.settings)
            app = firebase_admin.initialize_app(credentials.Certificate(key), name=FIREBASE_APP_NAME)
        self._db = firestore.client(app)
        logger.info(f"Connected to Firestore collection '{self.collection}'")

    def test_connection(self) -> bool:
        """Test Firestore connectivity with a single-document read"""
        try:
            self.connect()
            list(self.db.collection(self.collection).limit(1).stream())
            return True
        except Exception as e:
            logger.error(f"Firestore connection test failed: {str(e)}")
            return False

    def fetch_products(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Fetch every document of the product collection as (document id, data) pairs"""
        try:
            docs = list(self.db.collection(self.collection).stream())
            products = [(doc.id, doc.to_dict() or {}) for doc in docs]
            logger.info(f"Fetched {len(products)} products from Firestore collection '{self.collection}'")
            return products
        except Exception as e:
            logger.error(f"Error fetching products: {str(e)}")
            raise

    def mark_migrated(self, record_id: str, shopify_id: int, migrated_at: str) -> None:
        """Write the migration marker back onto the source document"""
        self.db.collection(self.collection).document(record_id).update({
            "shopifyId": shopify_id,
            "migratedAt": migrated_at,
        })
