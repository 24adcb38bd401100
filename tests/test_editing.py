import copy

from billscan.core import editing
from billscan.core.models import EditSession
from billscan.core.schema import headers


def test_commit_round_trip(bill_records):
    s = editing.begin_edit(None, 0, 1, "5")
    assert s == EditSession(row=0, col=1, pending="5")
    s = editing.update_pending(s, "7")
    s, data = editing.commit(s, bill_records)

    assert s is None
    assert data[0][headers(data)[1]] == "7"
    assert data[0]["item"] == "7"


def test_commit_returns_new_dataset(bill_records):
    original = copy.deepcopy(bill_records)
    s = editing.update_pending(editing.begin_edit(None, 1, 2, "1.80"), "2.00")
    _, data = editing.commit(s, bill_records)

    assert bill_records == original
    assert data[1]["price"] == "2.00"
    assert data[0] is bill_records[0]


def test_update_pending_does_not_touch_dataset(bill_records):
    original = copy.deepcopy(bill_records)
    s = editing.begin_edit(None, 0, 1, "Milk")
    editing.update_pending(s, "Oat milk")
    assert bill_records == original


def test_cancel_leaves_data_unchanged(bill_records):
    original = copy.deepcopy(bill_records)
    s = editing.update_pending(editing.begin_edit(None, 0, 1, "Milk"), "X")
    assert editing.cancel(s) is None
    assert bill_records == original


def test_begin_edit_is_noop_while_editing_another_cell():
    s = editing.update_pending(editing.begin_edit(None, 0, 0, "a"), "changed")
    assert editing.begin_edit(s, 2, 1, "b") is s


def test_begin_edit_defaults_missing_value_to_empty():
    assert editing.begin_edit(None, 0, 0, None).pending == ""


def test_update_pending_when_idle():
    assert editing.update_pending(None, "x") is None


def test_commit_on_deleted_row_goes_idle(bill_records):
    s = editing.begin_edit(None, 5, 0, "x")
    s, data = editing.commit(s, bill_records)
    assert s is None
    assert data is bill_records


def test_commit_with_out_of_range_column(bill_records):
    s = editing.begin_edit(None, 0, 9, "x")
    s, data = editing.commit(s, bill_records)
    assert s is None
    assert data is bill_records


def test_commit_without_dataset():
    s, data = editing.commit(editing.begin_edit(None, 0, 0, ""), None)
    assert s is None and data is None


def test_commit_skips_when_column_now_resolves_elsewhere(bill_records):
    s = editing.begin_edit(None, 0, 1, "Milk", field="item")
    # The item column disappears, so index 1 now points at price
    shifted = [{k: v for k, v in r.items() if k != "item"} for r in bill_records]
    assert headers(shifted)[1] != "item"

    s = editing.update_pending(s, "Changed")
    s, data = editing.commit(s, shifted)
    assert s is None
    assert data is shifted


def test_handle_key_enter_commits(bill_records):
    s = editing.update_pending(editing.begin_edit(None, 2, 3, "25"), "30")
    s, data = editing.handle_key(s, bill_records, "Enter")
    assert s is None
    assert data[2]["litres"] == "30"


def test_handle_key_escape_cancels(bill_records):
    s = editing.update_pending(editing.begin_edit(None, 2, 3, "25"), "30")
    s, data = editing.handle_key(s, bill_records, "Escape")
    assert s is None
    assert data is bill_records


def test_other_keys_keep_editing(bill_records):
    s = editing.begin_edit(None, 0, 0, "Corner Store")
    assert editing.handle_key(s, bill_records, "a") == (s, bill_records)


def test_blur_commits(bill_records):
    s = editing.update_pending(editing.begin_edit(None, 0, 0, "Corner Store"), "Deli")
    s, data = editing.blur(s, bill_records)
    assert s is None
    assert data[0]["shop_name"] == "Deli"
