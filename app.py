"""
app.py
Streamlit Customer Ledger (single session).
Run: streamlit run app.py
"""

from __future__ import annotations

import asyncio
import logging

import pandas as pd
import streamlit as st

import actions
import customer_api
import db
import utils
import view_state as vs
from config import load_settings
from models import ROWS_PER_PAGE_OPTIONS, STATUS_OPTIONS

st.set_page_config(page_title="Customer Ledger", layout="wide")

FIELD_LABELS = {
    "name": "Name",
    "description": "Description",
    "status": "Status",
    "rate": "Rate",
    "balance": "Balance",
    "deposit": "Deposit",
}


def init_once():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    db.init_db()


def init_state():
    defaults = {
        "customers": None,
        "view": vs.ViewState(),
        "dialog": vs.DialogState(),
        "dialog_nonce": 0,
        "table_nonce": 0,
        "pending": None,
        "failed": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def load_customers():
    with st.spinner("Loading..."):
        customers, view = asyncio.run(actions.load(st.session_state.view))
    st.session_state.customers = customers
    st.session_state.view = view


# ---------- State transitions (widget callbacks) ----------

def _set_view(view: vs.ViewState):
    st.session_state.view = view
    st.session_state.table_nonce += 1


def on_page(page: int):
    _set_view(vs.set_page(st.session_state.view, page))


def on_rows_per_page():
    _set_view(vs.set_page_size(st.session_state.view, st.session_state.rows_per_page))


def on_toggle_all(row_ids: list[str]):
    _set_view(vs.toggle_all(st.session_state.view, row_ids))


def on_primary_action():
    st.session_state.dialog = vs.open_dialog(st.session_state.view, st.session_state.customers)
    st.session_state.dialog_nonce += 1


def on_delete():
    st.session_state.pending = ("delete",)


def on_retry():
    failed = st.session_state.failed
    st.session_state.failed = None
    if failed:
        st.session_state.pending = failed["op"]


def on_dismiss():
    st.session_state.failed = None


# ---------- Mutations ----------

SUCCESS_MESSAGES = {
    "create": "Customer added.",
    "update": "Customer updated.",
    "delete": "Customers deleted.",
}


def process_pending():
    op = st.session_state.pending
    if not op:
        return
    st.session_state.pending = None

    view = st.session_state.view
    kind = op[0]
    with st.spinner("Saving..."):
        if kind == "create":
            result = asyncio.run(actions.submit_create(view, op[1]))
        elif kind == "update":
            result = asyncio.run(actions.submit_update(view, op[1], op[2].to_dict()))
        else:
            result = asyncio.run(actions.submit_delete(view))

    st.session_state.customers = result.customers
    _set_view(result.state)
    if result.ok:
        st.toast(SUCCESS_MESSAGES[kind])
    else:
        st.session_state.failed = {"op": op, "message": result.error or "Operation failed."}


def show_failure():
    failed = st.session_state.failed
    if not failed:
        return
    st.error(failed["message"])
    c1, c2, _ = st.columns([1, 1, 6])
    c1.button("Retry", on_click=on_retry, type="primary", key="retry_failed")
    c2.button("Dismiss", on_click=on_dismiss, key="dismiss_failed")


# ---------- Add/update dialog ----------

def customer_form(dialog: vs.DialogState, defaults: dict, nonce: int):
    errors_key = f"form-errors-{nonce}"
    errors = st.session_state.get(errors_key, {})

    def field_error(name: str):
        if name in errors:
            st.caption(f":red[{errors[name]}]")

    with st.form(key=f"customer-form-{nonce}"):
        raw = {}
        raw["name"] = st.text_input("Name", value=defaults["name"], placeholder="Customer name", key=f"name-{nonce}")
        field_error("name")
        raw["description"] = st.text_input(
            "Description", value=defaults["description"], placeholder="Description", key=f"description-{nonce}"
        )
        field_error("description")
        status_index = STATUS_OPTIONS.index(defaults["status"]) if defaults["status"] in STATUS_OPTIONS else 0
        raw["status"] = st.selectbox("Status", options=list(STATUS_OPTIONS), index=status_index, key=f"status-{nonce}")
        field_error("status")
        for field in ("rate", "balance", "deposit"):
            raw[field] = st.text_input(
                FIELD_LABELS[field], value=str(defaults[field]), placeholder="0", key=f"{field}-{nonce}"
            )
            field_error(field)

        c1, c2 = st.columns(2)
        with c1:
            cancelled = st.form_submit_button("Cancel")
        with c2:
            submitted = st.form_submit_button(
                "Update" if dialog.mode == vs.DIALOG_UPDATE else "Add", type="primary"
            )

    if cancelled:
        st.session_state.pop(errors_key, None)
        st.rerun()

    if submitted:
        errors = utils.validate_customer_inputs(raw)
        if errors:
            st.session_state[errors_key] = errors
            st.rerun(scope="fragment")
        st.session_state.pop(errors_key, None)
        payload = utils.clean_customer_inputs(raw)
        if dialog.mode == vs.DIALOG_UPDATE:
            st.session_state.pending = ("update", dialog.customer_id, payload)
        else:
            st.session_state.pending = ("create", payload)
        # Closes the dialog right away; the outcome is reported on the page.
        st.rerun()


@st.dialog("Add Customer")
def add_customer_dialog(dialog: vs.DialogState, defaults: dict, nonce: int):
    customer_form(dialog, defaults, nonce)


@st.dialog("Update Customer")
def update_customer_dialog(dialog: vs.DialogState, defaults: dict, nonce: int):
    customer_form(dialog, defaults, nonce)


def show_dialog():
    dialog = st.session_state.dialog
    if not dialog.is_open:
        return
    defaults = vs.form_defaults(dialog, st.session_state.customers)
    nonce = st.session_state.dialog_nonce
    if dialog.mode == vs.DIALOG_UPDATE:
        update_customer_dialog(dialog, defaults, nonce)
    else:
        add_customer_dialog(dialog, defaults, nonce)
    # The dialog keeps itself open until the next full rerun.
    st.session_state.dialog = vs.close_dialog()


# ---------- Page sections ----------

def toolbar(view: vs.DataView):
    left, right = st.columns([3, 1])
    with left:
        if view.selected_count == 0:
            query = st.text_input(
                "Search",
                value=st.session_state.view.query,
                placeholder="Search...",
                label_visibility="collapsed",
            )
            if query != st.session_state.view.query:
                _set_view(vs.set_query(st.session_state.view, query))
                st.rerun()
        else:
            c1, c2 = st.columns([1, 4])
            c1.caption(f"{view.selected_count} selected")
            c2.button(
                "🗑️ Delete",
                on_click=on_delete,
                type="secondary",
                disabled=bool(st.session_state.pending),
                key="delete_selected",
            )
    with right:
        label = "✏️ Update customer" if view.primary_action == "update" else "➕ Add customer"
        st.button(label, on_click=on_primary_action, type="primary", width="stretch")


def page_frame(view: vs.DataView) -> pd.DataFrame:
    records = []
    for i, c in enumerate(view.rows):
        records.append({
            "Select": c.id in view.selected_ids,
            "#": view.start_row_index + i + 1,
            "Name": f"{c.name} · {c.id[:10]}",
            "Description": c.description,
            "Status": utils.status_badge(c.status),
            "Rate": utils.format_amount(c.rate),
            "Balance": utils.format_amount(c.balance, show_sign=True),
            "Deposit": utils.format_amount(c.deposit, show_sign=True),
        })
    return pd.DataFrame(records, index=[c.id for c in view.rows])


def customer_table(view: vs.DataView):
    if not view.rows:
        st.markdown("**No Data Found**")
        st.caption("Add a customer to get started.")
        return

    row_ids = [c.id for c in view.rows]
    st.button(
        "Clear selection" if view.all_page_selected else "Select all",
        on_click=on_toggle_all,
        args=(row_ids,),
    )

    df = page_frame(view)
    edited = st.data_editor(
        df,
        key=f"table-{st.session_state.table_nonce}",
        hide_index=True,
        width="stretch",
        disabled=[col for col in df.columns if col != "Select"],
        column_config={"Select": st.column_config.CheckboxColumn("Select", width="small")},
    )

    changed = [cid for cid in row_ids if bool(edited.at[cid, "Select"]) != bool(df.at[cid, "Select"])]
    if changed:
        state = st.session_state.view
        for cid in changed:
            state = vs.toggle_selection(state, cid)
        _set_view(state)
        st.rerun()


def pagination(view: vs.DataView):
    if not view.filtered:
        return
    c1, c2, c3, c4, c5 = st.columns([3, 2, 1, 1, 1])
    c1.caption(view.range_label)
    with c2:
        st.selectbox(
            "Rows per page:",
            options=list(ROWS_PER_PAGE_OPTIONS),
            index=ROWS_PER_PAGE_OPTIONS.index(view.page_size),
            key="rows_per_page",
            on_change=on_rows_per_page,
        )
    c3.button("◀", on_click=on_page, args=(view.page - 1,), disabled=view.page <= 1, key="prev_page")
    c4.caption(f"{view.page} / {view.total_pages}")
    c5.button("▶", on_click=on_page, args=(view.page + 1,), disabled=view.page >= view.total_pages, key="next_page")


def sidebar(view: vs.DataView):
    with st.sidebar:
        st.title("💳 Customer Ledger")
        st.caption(f"{len(st.session_state.customers)} customers stored")

        st.subheader("Export")
        if view.filtered:
            st.download_button(
                "Download customers.csv",
                data=utils.customers_to_csv_bytes(view.filtered),
                file_name="customers.csv",
                mime="text/csv",
            )
        else:
            st.caption("No customers to export.")

        st.subheader("Sample data")
        st.caption("Insert a few demo customers (adds new rows each run).")
        if st.button("Insert sample data"):
            with st.spinner("Saving..."):
                asyncio.run(utils.insert_sample_data())
            load_customers()
            st.rerun()

        st.subheader("Clear ledger")
        confirm = st.checkbox("Confirm clear", value=False, key="clear_confirm")
        if st.button("Delete all customers", disabled=not confirm, key="clear_ledger"):
            with st.spinner("Saving..."):
                asyncio.run(customer_api.clear_customers())
            _set_view(vs.clear_selection(st.session_state.view))
            load_customers()
            st.rerun()


# --------- App entry ---------

def run():
    init_once()
    init_state()

    if st.session_state.customers is None:
        load_customers()

    process_pending()

    st.header("👥 Customers")
    show_failure()

    st.session_state.view = vs.reconcile(st.session_state.view, st.session_state.customers)
    view = vs.derive(st.session_state.customers, st.session_state.view)

    sidebar(view)
    toolbar(view)
    customer_table(view)
    pagination(view)
    show_dialog()


if __name__ == "__main__":
    run()
