import asyncio
import sys
from typing import List

from loguru import logger

from crm_lookup.clients import CrmBrowserClient
from crm_lookup.config import INPUT_FILE, LOG_LEVEL, MIN_MATCH_SCORE, OUTPUT_DIR
from crm_lookup.matchers.search_orchestrator import search_orchestrator
from crm_lookup.models import QueryOutcome
from crm_lookup.output_store import OutputStore
from crm_lookup.query_loader import load_run_input, queries_from_input, run_overrides


async def main(input_file: str = INPUT_FILE) -> List[QueryOutcome]:
    """
    Orchestrate the full lookup run.

    - Loads the run input (queries plus optional browser overrides).
    - Logs in once and runs every query sequentially on the same page.
    - Writes dataset records and page snapshots to OUTPUT_DIR.
    """
    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    run_input = load_run_input(input_file)
    queries = queries_from_input(run_input)

    client = CrmBrowserClient()
    client.apply_overrides(run_overrides(run_input))
    store = OutputStore(OUTPUT_DIR)

    outcomes = []
    try:
        await client.login()
        await client.open_customers()

        # One query at a time, every search reuses the single page
        for query in queries:
            outcome = await search_orchestrator(client, store, query, min_score=MIN_MATCH_SCORE)
            outcomes.append(outcome)
    finally:
        await client.close()

    logger.info(f"Done. {len(outcomes)} queries processed, results saved to {store.dataset_path}.")
    return outcomes


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else INPUT_FILE))
