from app.services.geo_codes import (
    STATE_DMA_MAPPING,
    US_STATE_NAMES,
    alternate_identifier,
    code_for_name,
    identifier_candidates,
    name_for_code,
    region_group,
    resolve_code,
    slugify,
    sub_regions_for,
)


def test_names_match_case_insensitively():
    assert code_for_name("texas") == "TX"
    assert code_for_name("  New York ") == "NY"
    assert code_for_name("DISTRICT OF COLUMBIA") == "DC"


def test_codes_are_exact_uppercase():
    assert name_for_code("TX") == "Texas"
    assert name_for_code("DC") == "District of Columbia"
    assert name_for_code("tx") is None


def test_unknown_identifiers_return_none_or_empty():
    assert code_for_name("Atlantis") is None
    assert code_for_name(None) is None
    assert name_for_code("ZZ") is None
    assert resolve_code("") is None
    assert sub_regions_for("ZZ") == []
    assert sub_regions_for(None) == []


def test_resolve_code_accepts_either_form():
    assert resolve_code("CA") == "CA"
    assert resolve_code("California") == "CA"
    assert resolve_code("wa") == "WA"


def test_sub_regions_returns_a_copy():
    names = sub_regions_for("CA")
    assert names
    names.append("MUTATED")
    assert "MUTATED" not in STATE_DMA_MAPPING["CA"]


def test_state_tables_cover_fifty_states_and_dc():
    assert len(US_STATE_NAMES) == 50
    assert "District of Columbia" not in US_STATE_NAMES
    assert all(resolve_code(name) for name in US_STATE_NAMES)
    assert "DC" in STATE_DMA_MAPPING


def test_region_group_defaults_to_midwest():
    assert region_group("TX") == "Southwest"
    assert region_group("ny") == "Northeast"
    assert region_group("ZZ") == "Midwest"
    assert region_group(None) == "Midwest"


def test_identifier_candidates_are_deduplicated_in_order():
    assert identifier_candidates("TX") == ["TX", "Texas", "tx"]
    assert identifier_candidates("texas") == ["texas", "TX", "Texas", "TEXAS"]
    assert identifier_candidates("Gotham") == ["Gotham", "GOTHAM", "gotham"]


def test_alternate_identifier_swaps_code_and_name():
    assert alternate_identifier("TX") == "Texas"
    assert alternate_identifier("Texas") == "TX"
    assert alternate_identifier("GOTHAM") == "gotham"
    assert alternate_identifier("Gotham") == "GOTHAM"
    assert alternate_identifier("123") is None


def test_slugify_collapses_whitespace():
    assert slugify("New  York") == "new_york"
    assert slugify("California") == "california"
