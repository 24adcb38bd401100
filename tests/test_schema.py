from billscan.core.schema import (field_names, find_primary, headers, is_dataset,
                                  primary_column, resolve_column)


def test_primary_column_moves_to_front():
    assert headers([{"item": "X", "shop_name": "A"}]) == ["shop_name", "item"]


def test_headers_collect_fields_in_first_seen_order(bill_records):
    assert headers(bill_records) == ["shop_name", "item", "price", "litres"]


def test_headers_are_stable_between_reads(bill_records):
    assert headers(bill_records) == headers(bill_records)


def test_headers_do_not_mutate_dataset(bill_records):
    before = [dict(r) for r in bill_records]
    headers(bill_records)
    assert bill_records == before


def test_vendor_match_is_case_insensitive():
    assert headers([{"total": "1", "Vendor Name": "Acme"}]) == ["Vendor Name", "total"]


def test_first_matching_field_wins():
    data = [{"item": "a", "vendor": "V", "shop": "S"}]
    assert primary_column(data) == "vendor"
    assert headers(data) == ["vendor", "item", "shop"]


def test_substring_heuristic_also_matches_unrelated_names():
    assert find_primary(["qty", "shopping_list"]) == "shopping_list"


def test_no_primary_keeps_order():
    assert headers([{"b": "1"}, {"a": "2", "b": "3"}]) == ["b", "a"]
    assert primary_column([{"b": "1"}]) is None


def test_invalid_or_empty_datasets_have_no_headers():
    assert headers(None) == []
    assert headers([]) == []
    assert headers("not a dataset") == []
    assert headers([{"a": "1"}, "oops"]) == []
    assert not is_dataset({"a": "1"})
    assert field_names(None) == []


def test_resolve_column_bounds(bill_records):
    assert resolve_column(bill_records, 0) == "shop_name"
    assert resolve_column(bill_records, 3) == "litres"
    assert resolve_column(bill_records, 4) is None
    assert resolve_column(bill_records, -1) is None
    assert resolve_column(None, 0) is None
