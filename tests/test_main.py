import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import main
from crm_lookup.models import AddressQuery, QueryOutcome


@pytest.mark.asyncio
async def test_main_runs_queries_in_order_and_closes_browser(tmp_path):
    input_file = tmp_path / "input.json"
    input_file.write_text(json.dumps({"addresses": ["1462 22nd", "99 Oak Ave"], "headless": False}))

    mock_client = MagicMock()
    mock_client.login = AsyncMock()
    mock_client.open_customers = AsyncMock()
    mock_client.close = AsyncMock()

    async def fake_orchestrator(client, store, query, min_score=0):
        return QueryOutcome(query=query)

    with patch("main.CrmBrowserClient", return_value=mock_client), \
         patch("main.search_orchestrator", side_effect=fake_orchestrator) as mock_orchestrator, \
         patch("main.OUTPUT_DIR", str(tmp_path / "out")):
        outcomes = await main.main(str(input_file))

    assert [o.query for o in outcomes] == [AddressQuery(address="1462 22nd"), AddressQuery(address="99 Oak Ave")]
    assert mock_orchestrator.call_count == 2
    mock_client.apply_overrides.assert_called_once_with({"headless": False})
    mock_client.login.assert_awaited_once()
    mock_client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_closes_browser_when_a_query_fails(tmp_path):
    input_file = tmp_path / "input.json"
    input_file.write_text(json.dumps({"addresses": ["1462 22nd"]}))

    mock_client = MagicMock()
    mock_client.login = AsyncMock()
    mock_client.open_customers = AsyncMock()
    mock_client.close = AsyncMock()

    with patch("main.CrmBrowserClient", return_value=mock_client), \
         patch("main.search_orchestrator", AsyncMock(side_effect=RuntimeError("page crashed"))), \
         patch("main.OUTPUT_DIR", str(tmp_path / "out")):
        with pytest.raises(RuntimeError):
            await main.main(str(input_file))

    mock_client.close.assert_awaited_once()
