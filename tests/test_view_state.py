"""
Tests for the derived table view: filter, page window, selection, dialog.
"""

import pytest

import view_state as vs
from models import Customer


def make_customer(n, status="Open", description=None):
    return Customer(
        id=f"id-{n:03d}",
        name=f"C{n}",
        description=description or f"Customer number {n}",
        status=status,
        rate=10.0 * n,
        balance=-5.0 * n,
        deposit=1.5 * n,
    )


def make_customers(count):
    return [make_customer(n) for n in range(1, count + 1)]


class TestFilterCustomers:
    def test_blank_query_returns_everything_in_order(self):
        customers = make_customers(5)
        assert vs.filter_customers(customers, "") == customers
        assert vs.filter_customers(customers, "   ") == customers

    def test_matches_status_case_insensitively(self):
        customers = [
            make_customer(1, "Open"),
            make_customer(2, "Paid"),
            make_customer(3, "Due"),
            make_customer(4, "Open"),
        ]
        result = vs.filter_customers(customers, "paid")
        assert [c.name for c in result] == ["C2"]

    def test_matches_name_and_description(self):
        customers = [
            make_customer(1, description="weekly deliveries"),
            make_customer(2, description="Monthly retainer"),
        ]
        assert [c.name for c in vs.filter_customers(customers, "MONTHLY")] == ["C2"]
        assert [c.name for c in vs.filter_customers(customers, "c1")] == ["C1"]

    def test_query_is_trimmed(self):
        customers = make_customers(3)
        assert [c.name for c in vs.filter_customers(customers, "  C2 ")] == ["C2"]

    @pytest.mark.parametrize("query", ["C1", "number", "open", "zzz", "2"])
    def test_result_is_an_ordered_subsequence(self, query):
        customers = make_customers(15)
        result = vs.filter_customers(customers, query)
        positions = [customers.index(c) for c in result]
        assert positions == sorted(positions)
        assert len(set(positions)) == len(positions)


class TestPagination:
    def test_twelve_customers_ten_per_page(self):
        customers = make_customers(12)
        assert [c.name for c in vs.paginate(customers, 1, 10)] == [f"C{n}" for n in range(1, 11)]
        assert [c.name for c in vs.paginate(customers, 2, 10)] == ["C11", "C12"]
        assert vs.total_pages(12, 10) == 2

    def test_total_pages_is_at_least_one(self):
        assert vs.total_pages(0, 10) == 1
        assert vs.total_pages(10, 10) == 1
        assert vs.total_pages(11, 10) == 2

    @pytest.mark.parametrize("count", [0, 1, 7, 12, 50, 51])
    @pytest.mark.parametrize("page_size", [1, 5, 10, 50])
    def test_pages_reconstruct_the_list(self, count, page_size):
        customers = make_customers(count)
        pages = [
            vs.paginate(customers, page, page_size)
            for page in range(1, vs.total_pages(count, page_size) + 1)
        ]
        assert all(len(p) <= page_size for p in pages)
        assert [c for p in pages for c in p] == customers

    def test_page_past_the_end_is_empty(self):
        assert vs.paginate(make_customers(3), 4, 5) == []


class TestTransitions:
    def test_set_query_resets_page(self):
        state = vs.ViewState(page=3)
        state = vs.set_query(state, "due")
        assert state.query == "due"
        assert state.page == 1

    def test_set_page_never_goes_below_one(self):
        assert vs.set_page(vs.ViewState(), 0).page == 1
        assert vs.set_page(vs.ViewState(), 4).page == 4

    def test_set_page_size_resets_page(self):
        state = vs.set_page_size(vs.ViewState(page=2), 20)
        assert state.page_size == 20
        assert state.page == 1

    def test_set_page_size_rejects_unknown_sizes(self):
        with pytest.raises(ValueError):
            vs.set_page_size(vs.ViewState(), 7)

    def test_transitions_do_not_mutate_the_original(self):
        state = vs.ViewState()
        vs.toggle_selection(state, "a")
        vs.set_query(state, "x")
        assert state == vs.ViewState()

    def test_toggle_selection_flips_membership(self):
        state = vs.toggle_selection(vs.ViewState(), "a")
        assert state.selected_ids == {"a"}
        state = vs.toggle_selection(state, "b")
        assert state.selected_ids == {"a", "b"}
        state = vs.toggle_selection(state, "a")
        assert state.selected_ids == {"b"}

    def test_toggle_all_selects_exactly_the_passed_rows(self):
        state = vs.ViewState(selected_ids=frozenset({"elsewhere", "a"}))
        state = vs.toggle_all(state, ["a", "b", "c"])
        assert state.selected_ids == {"a", "b", "c"}

    def test_toggle_all_clears_everything_when_all_rows_selected(self):
        state = vs.ViewState(selected_ids=frozenset({"a", "b", "other-page"}))
        state = vs.toggle_all(state, ["a", "b"])
        assert state.selected_ids == frozenset()

    def test_toggle_all_with_no_rows_clears(self):
        state = vs.toggle_all(vs.ViewState(selected_ids=frozenset({"a"})), [])
        assert state.selected_ids == frozenset()

    def test_clear_selection(self):
        state = vs.clear_selection(vs.ViewState(selected_ids=frozenset({"a"})))
        assert state.selected_ids == frozenset()


class TestReconcile:
    def test_page_beyond_total_resets_to_one(self):
        state = vs.ViewState(page=3, page_size=5)
        assert vs.reconcile(state, make_customers(7)).page == 1

    def test_page_within_total_is_kept(self):
        state = vs.ViewState(page=2, page_size=5)
        assert vs.reconcile(state, make_customers(7)) is state

    def test_filter_shrinking_results_resets_page(self):
        state = vs.ViewState(query="C1", page=2, page_size=5)
        # C1, C10..C12 -> a single page
        assert vs.reconcile(state, make_customers(12)).page == 1

    def test_selection_is_not_pruned(self):
        state = vs.ViewState(selected_ids=frozenset({"gone"}))
        assert vs.reconcile(state, make_customers(2)).selected_ids == {"gone"}


class TestDerive:
    def test_view_of_second_page(self):
        view = vs.derive(make_customers(12), vs.ViewState(page=2))
        assert [c.name for c in view.rows] == ["C11", "C12"]
        assert view.total_pages == 2
        assert view.start_row_index == 10
        assert view.range_label == "11-12 of 12"

    def test_empty_view(self):
        view = vs.derive([], vs.ViewState())
        assert view.rows == []
        assert view.total_pages == 1
        assert view.range_label == "0 of 0"
        assert not view.all_page_selected

    def test_derive_applies_page_reset(self):
        view = vs.derive(make_customers(3), vs.ViewState(page=5))
        assert view.page == 1
        assert len(view.rows) == 3

    def test_single_selection_switches_primary_action(self):
        customers = make_customers(3)
        view = vs.derive(customers, vs.ViewState(selected_ids=frozenset({"id-002"})))
        assert view.single_selected == customers[1]
        assert view.primary_action == "update"

    def test_multiple_or_no_selection_means_create(self):
        customers = make_customers(3)
        assert vs.derive(customers, vs.ViewState()).primary_action == "create"
        two = vs.ViewState(selected_ids=frozenset({"id-001", "id-002"}))
        assert vs.derive(customers, two).primary_action == "create"

    def test_stale_single_selection_does_not_resolve(self):
        view = vs.derive(make_customers(2), vs.ViewState(selected_ids=frozenset({"gone"})))
        assert view.single_selected is None
        assert view.selected_count == 1
        assert view.primary_action == "create"

    def test_all_page_selected(self):
        customers = make_customers(12)
        state = vs.toggle_all(vs.ViewState(), [c.id for c in customers[:10]])
        view = vs.derive(customers, state)
        assert view.all_page_selected
        assert view.selected_count == 10


class TestDialog:
    def test_opens_for_create_without_selection(self):
        dialog = vs.open_dialog(vs.ViewState(), make_customers(2))
        assert dialog.mode == vs.DIALOG_CREATE
        assert dialog.title == "Add Customer"

    def test_opens_for_update_with_one_selected(self):
        state = vs.ViewState(selected_ids=frozenset({"id-002"}))
        dialog = vs.open_dialog(state, make_customers(2))
        assert dialog == vs.DialogState(vs.DIALOG_UPDATE, "id-002")
        assert dialog.title == "Update Customer"

    def test_close(self):
        assert not vs.close_dialog().is_open

    def test_create_defaults_are_blank(self):
        defaults = vs.form_defaults(vs.DialogState(vs.DIALOG_CREATE), make_customers(2))
        assert defaults == {
            "name": "",
            "description": "",
            "status": "Open",
            "rate": 0.0,
            "balance": 0.0,
            "deposit": 0.0,
        }

    def test_update_defaults_come_from_current_record(self):
        customers = make_customers(2)
        defaults = vs.form_defaults(vs.DialogState(vs.DIALOG_UPDATE, "id-002"), customers)
        assert defaults == customers[1].input_fields().to_dict()

    def test_defaults_are_fresh_copies(self):
        first = vs.form_defaults(vs.DialogState(vs.DIALOG_CREATE), [])
        first["name"] = "typed before cancel"
        assert vs.form_defaults(vs.DialogState(vs.DIALOG_CREATE), [])["name"] == ""
