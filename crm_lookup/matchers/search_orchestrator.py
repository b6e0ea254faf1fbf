# crm_lookup/matchers/search_orchestrator.py

from loguru import logger

from crm_lookup.address_parser import parse_address
from crm_lookup.clients import CrmBrowserClient
from crm_lookup.config import MIN_MATCH_SCORE
from crm_lookup.detail_extractor import customer_id_from_url
from crm_lookup.matchers.row_selector import best_ranked, rank_rows
from crm_lookup.models import AddressQuery, QueryOutcome
from crm_lookup.output_store import (
    OutputStore,
    chosen_record,
    no_result_record,
    preview_record,
    safe_slug,
)


async def _save_snapshot(client: CrmBrowserClient, store: OutputStore, prefix: str, slug: str) -> None:
    store.set_value(f"{prefix}_{slug}.html", await client.page_html())
    store.set_value(f"{prefix}_{slug}.png", await client.screenshot())


async def search_orchestrator(
    client: CrmBrowserClient,
    store: OutputStore,
    query: AddressQuery,
    min_score: int = MIN_MATCH_SCORE,
) -> QueryOutcome:
    """
    Run one quick search, pick the best result row, open it and persist
    what was found.

    Args:
        client (CrmBrowserClient): Logged-in browser client.
        store (OutputStore): Where records and page snapshots are written.
        query (AddressQuery): Address to search plus optional city/zip hints.
        min_score (int): Lowest score accepted as a match (0 accepts any row).

    Returns:
        QueryOutcome: Outcome for this query.
    """
    parsed = parse_address(query.address)
    slug = safe_slug(query.address)
    outcome = QueryOutcome(query=query)

    where = f"{', ' + query.city if query.city else ''}{' ' + query.zip if query.zip else ''}"
    logger.info(f"Searching: {query.address}{where}")

    await client.quick_search(query.address)
    rows = await client.read_result_rows()

    if not rows:
        logger.warning("No rows returned.")
        store.push_record(no_result_record(outcome))
        await _save_snapshot(client, store, "RESULTS_PAGE", slug)
        return outcome

    ranked = rank_rows(rows, parsed, query.city, query.zip)
    outcome.top_rows = ranked[:3]

    logger.info(f"===== SEARCH RESULTS FOR: {query.address} =====")
    logger.info(f"Total rows found: {len(ranked)}")
    logger.info("Top 3 scores:")
    for i, s in enumerate(outcome.top_rows):
        logger.info(f"  {i + 1}. Score: {s.score} | Name: {s.row.cells.name} | Location: {s.row.cells.service_location}")
        logger.info(f"     Breakdown: {s.breakdown.to_dict()}")

    store.push_record(preview_record(outcome))

    best = best_ranked(ranked, min_score)
    if best is None:
        logger.warning(f"Best score {ranked[0].score} is below the minimum of {min_score}. Saving preview only.")
        return outcome
    outcome.chosen = best

    logger.info(f"Best match index: {best.original_index}")
    if not await client.open_row(best.original_index):
        return outcome

    outcome.detail_opened = True
    outcome.detail_url = await client.current_url()
    outcome.customer_id = customer_id_from_url(outcome.detail_url)
    logger.info(f"Detail page URL: {outcome.detail_url}")
    logger.info(f"Customer ID: {outcome.customer_id}")

    outcome.details = await client.extract_details()
    store.push_record(chosen_record(outcome))
    await _save_snapshot(client, store, "DETAIL", slug)

    logger.info(
        f'Opened details for "{query.address}" → {best.row.cells.name or "(name unknown)"} (score: {best.score})'
    )
    return outcome
