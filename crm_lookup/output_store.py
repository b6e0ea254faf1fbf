"""
Local output store: one JSON line per dataset record plus a key-value folder for
page snapshots (HTML and screenshots).
"""
import json
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Union

from loguru import logger

from crm_lookup.config import OUTPUT_DIR
from crm_lookup.models import QueryOutcome

DATASET_FILE = "dataset.jsonl"
KEY_VALUE_DIR = "key_value_store"


def safe_slug(address: str) -> str:
    """Filesystem-safe key derived from a query address."""
    return re.sub(r"\W+", "_", address or "", flags=re.ASCII) or "query"


def scraped_at() -> str:
    return datetime.now(timezone.utc).isoformat()


class OutputStore:
    """Writes dataset records and binary/text blobs under a single output directory."""

    def __init__(self, output_dir: str = OUTPUT_DIR):
        self.output_dir = output_dir
        self.dataset_path = os.path.join(output_dir, DATASET_FILE)
        self.kv_dir = os.path.join(output_dir, KEY_VALUE_DIR)
        os.makedirs(self.kv_dir, exist_ok=True)

    def push_record(self, record: Dict[str, Any]) -> None:
        """Append one record to the dataset file."""
        with open(self.dataset_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def set_value(self, key: str, data: Union[str, bytes]) -> str:
        """
        Store a blob under `key` and return its path.
        Text is written as UTF-8, bytes are written as-is.
        """
        path = os.path.join(self.kv_dir, key)
        if isinstance(data, bytes):
            with open(path, "wb") as f:
                f.write(data)
        else:
            with open(path, "w", encoding="utf-8") as f:
                f.write(data)
        logger.debug(f"Saved {key} to {path}")
        return path


def no_result_record(outcome: QueryOutcome) -> Dict[str, Any]:
    return {
        "query": outcome.query.to_dict(),
        "detailOpened": False,
        "rowsPreview": [],
        "scrapedAt": scraped_at(),
    }


def preview_record(outcome: QueryOutcome) -> Dict[str, Any]:
    return {
        "query": outcome.query.to_dict(),
        "tablePreviewTop3": [s.preview() for s in outcome.top_rows[:3]],
        "scrapedAt": scraped_at(),
    }


def chosen_record(outcome: QueryOutcome) -> Dict[str, Any]:
    return {
        "query": outcome.query.to_dict(),
        "chosen": outcome.chosen.preview() if outcome.chosen else None,
        "detailOpened": outcome.detail_opened,
        "detailUrl": outcome.detail_url,
        "customerId": outcome.customer_id,
        "details": outcome.details,
        "scrapedAt": scraped_at(),
    }
