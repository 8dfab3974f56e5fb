"""
Streamlit Frontend for Finance App

Pages:
1. Dashboard - send a test email and see the raw dispatch result
2. Add Transaction - create a transaction, optionally from a receipt;
   with ?edit=<id> the same form edits an existing transaction
3. Settings - configuration status

All state that matters lives in the controllers from finance_app; this
module only draws widgets and forwards values.
"""

import asyncio
from decimal import Decimal
from typing import Optional

import streamlit as st

from finance_app.config import get_settings
from finance_app.forms import TransactionFormController, account_label
from finance_app.models.transaction import (
    Account,
    Category,
    RecurringInterval,
    TransactionType,
)
from finance_app.orchestrator import create_app_components, create_transaction_form


st.set_page_config(
    page_title="Finance App",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


DEFAULT_ACCOUNTS = [
    Account(id="acc-current", name="Current", balance=Decimal("1250.00"), is_default=True),
    Account(id="acc-savings", name="Savings", balance=Decimal("8400.00")),
]

DEFAULT_CATEGORIES = [
    Category(id="salary", name="Salary", type=TransactionType.INCOME),
    Category(id="freelance", name="Freelance", type=TransactionType.INCOME),
    Category(id="investments", name="Investments", type=TransactionType.INCOME),
    Category(id="housing", name="Housing", type=TransactionType.EXPENSE),
    Category(id="groceries", name="Groceries", type=TransactionType.EXPENSE),
    Category(id="utilities", name="Utilities", type=TransactionType.EXPENSE),
    Category(id="transportation", name="Transportation", type=TransactionType.EXPENSE),
    Category(id="entertainment", name="Entertainment", type=TransactionType.EXPENSE),
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    email_dispatcher, transaction_actions, transaction_storage = get_components()

    st.sidebar.title("💰 Finance App")
    st.sidebar.markdown("---")

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    # ?edit=<transaction id> opens the form in edit mode
    edit_id = st.query_params.get("edit")
    if edit_id:
        if st.sidebar.button("✖️ Cancel edit"):
            _leave_edit_mode()
        render_transaction_page(transaction_actions, transaction_storage, edit_id)
        return

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "➕ Add Transaction", "⚙️ Settings"],
        index=0,
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(email_dispatcher, transaction_storage)
    elif page == "➕ Add Transaction":
        render_transaction_page(transaction_actions, transaction_storage)
    elif page == "⚙️ Settings":
        render_settings_page()


def _leave_edit_mode(message=None):
    if "edit" in st.query_params:
        del st.query_params["edit"]
    st.session_state.pop("transaction_form", None)
    st.session_state.pop("transaction_form_key", None)
    if message:
        st.session_state.flash = message
    st.rerun()


def render_dashboard_page(email_dispatcher, transaction_storage):
    """Dashboard: test email button and recent transactions."""
    st.title("🏠 Dashboard")

    if "email_sending" not in st.session_state:
        st.session_state.email_sending = False
    if "email_result" not in st.session_state:
        st.session_state.email_result = None

    if email_dispatcher is None:
        st.warning("Email is not configured. Set RESEND_API_KEY to enable it.")
    else:
        label = "Sending..." if st.session_state.email_sending else "Send Email"
        if st.button(label, disabled=st.session_state.email_sending, type="primary"):
            st.session_state.email_sending = True
            try:
                result = run_async(
                    email_dispatcher.send(
                        get_settings().app.test_email_recipient,
                        "Hello from Finance App",
                        "<p>This is a test email.</p>",
                    )
                )
                st.session_state.email_result = result.to_dict()
            finally:
                st.session_state.email_sending = False

        if st.session_state.email_result is not None:
            st.json(st.session_state.email_result)

    st.markdown("---")
    st.subheader("Recent Transactions")
    transactions = run_async(transaction_storage.list_transactions(limit=20))
    if not transactions:
        st.info("No transactions yet. Use 'Add Transaction' to create one.")
        return
    st.dataframe(
        [
            {
                "Date": t.date.isoformat(),
                "Type": t.type.value,
                "Amount": f"{t.amount:.2f}",
                "Category": t.category,
                "Description": t.description or "",
                "Recurring": t.recurring_interval.value if t.recurring_interval else "",
            }
            for t in transactions
        ],
        use_container_width=True,
    )

    labels = {
        t.id: f"{t.date.isoformat()} · {t.category} · {t.amount:.2f}"
        for t in transactions
    }
    col1, col2 = st.columns([3, 1])
    with col1:
        selected = st.selectbox(
            "Transaction",
            options=list(labels),
            format_func=labels.get,
            label_visibility="collapsed",
        )
    with col2:
        if st.button("✏️ Edit", use_container_width=True):
            st.query_params["edit"] = selected
            st.rerun()


def _get_form(transaction_actions, transaction_storage, edit_id=None):
    """Form held in session state, rebuilt when switching between create and edit."""
    key = edit_id or "new"
    if st.session_state.get("transaction_form_key") != key:
        initial_data = None
        if edit_id:
            initial_data = run_async(transaction_storage.get_transaction(edit_id))
            if initial_data is None:
                return None
        st.session_state.transaction_form = create_transaction_form(
            transaction_actions,
            accounts=DEFAULT_ACCOUNTS,
            categories=DEFAULT_CATEGORIES,
            initial_data=initial_data,
        )
        st.session_state.transaction_form_key = key
    return st.session_state.transaction_form


def render_transaction_page(transaction_actions, transaction_storage, edit_id=None):
    """Render the transaction form, in edit mode when edit_id is given."""
    form: Optional[TransactionFormController] = _get_form(
        transaction_actions, transaction_storage, edit_id
    )
    if form is None:
        st.title("✏️ Edit Transaction")
        st.error(f"Transaction not found: {edit_id}")
        return

    st.title("✏️ Edit Transaction" if form.edit_mode else "➕ Add Transaction")
    values = form.values
    currency = get_settings().app.currency_symbol

    if form.can_scan_receipt:
        with st.expander("🧾 Pre-fill from a scanned receipt"):
            scan_amount = st.number_input("Scanned amount", min_value=0.0, step=0.01, format="%.2f")
            scan_date = st.date_input("Scanned date", value=values["date"], key="scan_date")
            scan_description = st.text_input("Scanned description", key="scan_description")
            if st.button("Apply scan"):
                form.apply_scan({
                    "amount": str(scan_amount),
                    "date": scan_date,
                    "description": scan_description or None,
                })
                st.rerun()

    types = list(TransactionType)
    tx_type = st.selectbox(
        "Type",
        options=types,
        index=types.index(form.transaction_type),
        format_func=lambda x: x.value.title(),
    )
    form.set_value("type", tx_type)

    col1, col2 = st.columns(2)
    with col1:
        amount = st.text_input("Amount", value=values["amount"], placeholder="0.00")
    with col2:
        account_ids = [a.id for a in form.accounts]
        current_account = values.get("account_id")
        account_id = st.selectbox(
            "Account",
            options=account_ids,
            index=account_ids.index(current_account) if current_account in account_ids else 0,
            format_func=lambda i: account_label(
                next(a for a in form.accounts if a.id == i), currency
            ),
        )

    categories = form.filtered_categories()
    category_ids = [c.id for c in categories]
    current_category = values.get("category")
    category = st.selectbox(
        "Category",
        options=category_ids,
        index=category_ids.index(current_category) if current_category in category_ids else None,
        format_func=lambda i: next(c.name for c in categories if c.id == i),
        placeholder="Select category",
    )

    tx_date = st.date_input("Date", value=values["date"])
    st.caption(form.date_label)

    description = st.text_input("Description", value=values.get("description") or "")

    is_recurring = st.toggle(
        "Recurring Transaction",
        value=values.get("is_recurring", False),
        help="Set up a recurring schedule",
    )
    form.set_value("is_recurring", is_recurring)

    interval = None
    if form.show_recurring_interval:
        intervals = list(RecurringInterval)
        current_interval = values.get("recurring_interval")
        interval = st.selectbox(
            "Recurring Interval",
            options=intervals,
            index=intervals.index(RecurringInterval(current_interval)) if current_interval else None,
            format_func=lambda x: x.value.title(),
            placeholder="Select interval",
        )

    for field, message in form.errors.items():
        st.error(f"{field.replace('_', ' ').title()}: {message}")

    if st.button(form.submit_label, type="primary", disabled=form.loading):
        form.set_value("amount", amount)
        form.set_value("account_id", account_id)
        form.set_value("category", category)
        form.set_value("date", tx_date)
        form.set_value("description", description)
        form.set_value("recurring_interval", interval)

        outcome = run_async(form.submit())
        if outcome.success and form.edit_mode:
            _leave_edit_mode(f"Transaction updated. Continue at {outcome.redirect_to}")
        elif outcome.success:
            st.success(f"Transaction saved. Continue at {outcome.redirect_to}")
        elif outcome.error:
            st.error(f"Failed to save: {outcome.error}")
        else:
            st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    from finance_app.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Resend (Email)", "resend"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your API keys. "
        "See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
