import json
import os

from crm_lookup.models import AddressQuery, CandidateRow, QueryOutcome, RowCells, ScoreBreakdown, ScoredRow
from crm_lookup.output_store import OutputStore, chosen_record, preview_record, safe_slug


def read_dataset(store):
    """Records written to the store dataset file, in order."""
    with open(store.dataset_path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def test_safe_slug():
    assert safe_slug("1462 22nd St, Denver") == "1462_22nd_St_Denver"
    assert safe_slug("") == "query"
    assert safe_slug("!!!") == "_"


def test_records_are_appended_as_json_lines(tmp_path):
    store = OutputStore(str(tmp_path))
    store.push_record({"a": 1})
    store.push_record({"b": "é"})
    assert read_dataset(store) == [{"a": 1}, {"b": "é"}]


def test_set_value_writes_text_and_bytes(tmp_path):
    store = OutputStore(str(tmp_path))
    html_path = store.set_value("DETAIL_x.html", "<html></html>")
    png_path = store.set_value("DETAIL_x.png", b"\x89PNG")
    with open(html_path, encoding="utf-8") as f:
        assert f.read() == "<html></html>"
    with open(png_path, "rb") as f:
        assert f.read() == b"\x89PNG"
    assert os.path.dirname(html_path) == store.kv_dir


def test_preview_and_chosen_records():
    scored = ScoredRow(
        row=CandidateRow(
            raw_text="John 1462 22nd St",
            cells=RowCells(name="John", service_location="1462 22nd St", href=""),
            original_index=0,
        ),
        score=60,
        breakdown=ScoreBreakdown(house=50, street_tokens=10),
    )
    outcome = QueryOutcome(
        query=AddressQuery(address="1462 22nd"),
        top_rows=[scored],
        chosen=scored,
        detail_opened=True,
        detail_url="https://admin.servicefusion.com/customer/view/42",
        customer_id="42",
    )

    preview = preview_record(outcome)
    assert preview["query"] == {"address": "1462 22nd", "city": "", "zip": ""}
    assert preview["tablePreviewTop3"][0]["breakdown"] == {"house": 50, "streetTokens": 10}
    assert preview["tablePreviewTop3"][0]["href"] is None

    chosen = chosen_record(outcome)
    assert chosen["chosen"]["score"] == 60
    assert chosen["detailOpened"] is True
    assert chosen["customerId"] == "42"
