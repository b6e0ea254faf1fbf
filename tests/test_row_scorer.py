from crm_lookup.address_parser import parse_address
from crm_lookup.matchers.row_scorer import score_row
from crm_lookup.models import CandidateRow, RowCells


def make_row(raw_text="", service_location="", email="", phone="", index=0, name=""):
    return CandidateRow(
        raw_text=raw_text,
        cells=RowCells(name=name, email=email, phone=phone, service_location=service_location),
        original_index=index,
    )


def test_house_tokens_and_contact_bonuses():
    row = make_row(
        raw_text="John Smith 1462 22nd St, Denver john@x.com 555-1234",
        service_location="1462 22nd St, Denver",
        email="john@x.com",
        phone="555-1234",
    )
    scored = score_row(row, parse_address("1462 22nd"))
    assert scored.score == 66
    assert scored.breakdown.to_dict() == {"house": 50, "streetTokens": 10, "email": 3, "phone": 3}


def test_unrelated_row_scores_zero_with_empty_breakdown():
    scored = score_row(make_row(raw_text="99 Oak Ave", service_location="99 Oak Ave"), parse_address("1462 22nd"))
    assert scored.score == 0
    assert scored.breakdown.to_dict() == {}


def test_all_hints_add_up():
    row = make_row(raw_text="Jane Roe 123 Main St Denver CO 80202", service_location="123 Main St")
    scored = score_row(row, parse_address("123 Main St"), city_hint="Denver", zip_hint="80202")
    assert scored.breakdown.to_dict() == {"house": 50, "zip": 40, "city": 20, "streetTokens": 15}
    assert scored.score == 125


def test_city_hint_adds_exactly_twenty():
    row = make_row(raw_text="Jane Roe 123 Main St Denver CO 80202", service_location="123 Main St")
    parsed = parse_address("123 Main St")
    without_city = score_row(row, parsed, zip_hint="80202")
    with_city = score_row(row, parsed, city_hint="Denver", zip_hint="80202")
    assert with_city.score - without_city.score == 20


def test_city_matches_service_location_only():
    row = make_row(raw_text="Jane Roe", service_location="5 Pine Rd, Boulder")
    scored = score_row(row, parse_address("Pine"), city_hint="  BOULDER ")
    assert scored.breakdown.city == 20


def test_zip_is_only_checked_against_row_text():
    row = make_row(raw_text="Jane Roe", service_location="5 Pine Rd 80301")
    scored = score_row(row, parse_address("Pine"), zip_hint="80301")
    assert scored.breakdown.zip == 0


def test_missing_hints_and_cells_do_not_crash():
    row = CandidateRow(raw_text=None, cells=RowCells(), original_index=0)
    scored = score_row(row, parse_address("10 Downing St"), city_hint=None, zip_hint=None)
    assert scored.score == 0


def test_whitespace_only_contact_cells_get_no_bonus():
    scored = score_row(make_row(email="   ", phone="\t"), parse_address("Nowhere"))
    assert scored.breakdown.email == 0
    assert scored.breakdown.phone == 0


def test_total_is_sum_of_signals():
    row = make_row(
        raw_text="A 12 Long Lane Springfield 99999",
        service_location="12 Long Lane",
        email="a@b.c",
    )
    scored = score_row(row, parse_address("12 Long Lane"), city_hint="Springfield", zip_hint="00000")
    assert scored.score == sum(scored.breakdown.to_dict().values())
    assert scored.score == 50 + 20 + 15 + 3


def test_whitespace_only_hints_are_absent():
    row = make_row(raw_text="99 Oak Ave", service_location="99 Oak Ave")
    scored = score_row(row, parse_address("1462 22nd"), city_hint="   ", zip_hint="\t ")
    assert scored.score == 0
    assert scored.breakdown.to_dict() == {}
