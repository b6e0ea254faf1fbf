import json
from typing import Any, Dict, List

import pandas as pd

from crm_lookup.models import AddressQuery

RUN_OVERRIDE_KEYS = ("headless", "slowMo", "navigationTimeoutSecs", "searchSettleMs", "selectors")

NO_TASKS_MESSAGE = (
    'Provide either "addresses" (array of strings) or "queries" (array of {address, city?, zip?}).'
)


def _text(value) -> str:
    """Cell/field value as a stripped string, None and NaN become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def queries_from_input(run_input: Dict[str, Any]) -> List[AddressQuery]:
    """
    Normalize a run input into address queries.

    `queries` wins over `addresses` when it is a non-empty list. Tasks whose
    address is empty are dropped.

    Raises:
        ValueError: If no task with an address remains.
    """
    queries = run_input.get("queries") or []
    addresses = run_input.get("addresses") or []

    if isinstance(queries, list) and queries:
        tasks = [
            AddressQuery(address=_text(q.get("address")), city=_text(q.get("city")), zip=_text(q.get("zip")))
            for q in queries
        ]
    elif isinstance(addresses, list):
        tasks = [AddressQuery(address=_text(a)) for a in addresses]
    else:
        tasks = []

    tasks = [t for t in tasks if t.address]
    if not tasks:
        raise ValueError(NO_TASKS_MESSAGE)
    return tasks


def load_queries_from_csv(file_path: str, nrows: int = None) -> List[AddressQuery]:
    """Load queries from a CSV with an `address` column and optional `city` / `zip` columns."""
    df = pd.read_csv(file_path, nrows=nrows, dtype=str)
    df.columns = [str(c).strip().lower() for c in df.columns]
    if "address" not in df.columns:
        raise ValueError(f"{file_path} has no 'address' column")
    records = [
        {"address": row.get("address"), "city": row.get("city"), "zip": row.get("zip")}
        for _, row in df.iterrows()
    ]
    return queries_from_input({"queries": records})


def load_run_input(file_path: str) -> Dict[str, Any]:
    """
    Load the run input file.

    JSON files are returned as-is (tasks plus optional run overrides). CSV files
    are turned into {"queries": [...]}.
    """
    if file_path.lower().endswith(".csv"):
        return {"queries": [q.to_dict() for q in load_queries_from_csv(file_path)]}
    with open(file_path, encoding="utf-8") as f:
        return json.load(f) or {}


def run_overrides(run_input: Dict[str, Any]) -> Dict[str, Any]:
    """Browser overrides carried by the run input."""
    return {k: run_input[k] for k in RUN_OVERRIDE_KEYS if k in run_input}
