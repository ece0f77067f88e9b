import json
import logging

from .aia_data import InvoiceApplicationData

logger = logging.getLogger(__name__)


def save_application(data: InvoiceApplicationData, path) -> bool:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data.to_mapping(), f, ensure_ascii=False, indent=2)
        return True
    except Exception:
        logger.exception("Failed to save application data")
        return False


def load_application(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return InvoiceApplicationData.from_mapping(payload)
    except Exception:
        logger.exception("Failed to load application data from %s", path)
        return None
