import json
import os
from typing import Any, Dict

from app.core.config import Settings
from app.core.exceptions import ConfigurationError


def load_service_account(settings: Settings) -> Dict[str, Any]:
    """Resolve Firebase service-account key from a file path or an inline JSON blob.

    The path takes precedence and is resolved relative to the working directory.
    """
    svc_path = settings.firebase_service_account_path
    svc_json = settings.firebase_service_account_json

    if svc_path:
        full_path = os.path.abspath(os.path.join(os.getcwd(), svc_path))
        if not os.path.exists(full_path):
            raise ConfigurationError(f"Firebase service account file not found at {full_path}")
        with open(full_path, "r", encoding="utf-8") as fh:
            try:
                return json.load(fh)
            except ValueError as e:
                raise ConfigurationError(f"Invalid Firebase service account file {full_path}: {e}") from e

    if svc_json:
        try:
            return json.loads(svc_json)
        except ValueError as e:
            raise ConfigurationError(f"Invalid FIREBASE_SERVICE_ACCOUNT_JSON: {e}") from e

    raise ConfigurationError(
        "No Firebase credentials found. Set FIREBASE_SERVICE_ACCOUNT_PATH or "
        "FIREBASE_SERVICE_ACCOUNT_JSON in env."
    )
