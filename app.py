import streamlit as st
from datetime import date

import config
from aggregator import budget_progress, category_totals, daily_series, month_summary, monthly_series
from auth import LoginThrottle, sign_in, sign_up
from dashboard import budget_bars, cat_spend, category_color, daily_spend, income_vs_expense_monthly, kpis, money
from database import SessionLocal, init_db
from errors import AuthError, StoreError, ValidationError
from export import EXPORT_FILENAME
from filters import active_filter_count, has_active_filters, available_categories, available_tags
from forms import DEFAULT_CATEGORIES, add_tag, validate_entry
from ledger import Ledger
from logging_setup import configure_logging, get_logger
from models import FilterSpec, TransactionRecord
from store import TransactionStore, load_budgets, save_budget

# --- Configuration ---
st.set_page_config(page_title="ExpenseTracker", layout="wide", page_icon="💰")
configure_logging()
logger = get_logger("expense_tracker.app")

FILTER_KEYS = ["f_search", "f_category", "f_type", "f_date_from", "f_date_to", "f_min", "f_max", "f_tags"]

# --- Database Session ---
init_db()

if "db" not in st.session_state:
    st.session_state.db = SessionLocal()

def get_db():
    return st.session_state.db


def flash(message: str, icon: str = "✅"):
    """Queue a toast that survives the next rerun."""
    st.session_state.setdefault("flash", []).append((message, icon))


def show_flash():
    for message, icon in st.session_state.pop("flash", []):
        st.toast(message, icon=icon)


# --- Authentication ---
def check_login():
    if "authenticated" not in st.session_state:
        st.session_state["authenticated"] = False
        st.session_state["user_id"] = None
        st.session_state["email"] = None
        st.session_state["throttle"] = LoginThrottle()

    if st.session_state.get("authenticated", False):
        return True

    show_flash()
    st.markdown("<h1 style='text-align: center;'>💰 ExpenseTracker</h1>", unsafe_allow_html=True)
    st.markdown("<p style='text-align: center; color: #9ca3af;'>Manage your finances</p>", unsafe_allow_html=True)

    _, center, _ = st.columns([1, 2, 1])
    with center:
        sign_in_tab, sign_up_tab = st.tabs(["Login", "Sign Up"])
        throttle = st.session_state["throttle"]

        with sign_in_tab:
            with st.form("login_form"):
                email = st.text_input("Email", placeholder="Email")
                password = st.text_input("Password", type="password", placeholder="Password")
                submitted = st.form_submit_button("Login", type="primary", use_container_width=True)

            if throttle.is_locked():
                st.error(f"Too many failed attempts. Please wait {throttle.seconds_left()} seconds before trying again.")
            elif submitted:
                try:
                    user = sign_in(get_db(), email, password)
                except AuthError as e:
                    st.error(f"❌ {e}")
                    if throttle.record_failure():
                        st.warning("Too many failed attempts. Login temporarily locked for 60 seconds.")
                else:
                    throttle.reset()
                    st.session_state["authenticated"] = True
                    st.session_state["user_id"] = user.id
                    st.session_state["email"] = user.email
                    flash("Logged in!")
                    st.rerun()

        with sign_up_tab:
            with st.form("signup_form"):
                new_email = st.text_input("Email", placeholder="Email", key="signup_email")
                new_password = st.text_input("Password", type="password", placeholder="Password", key="signup_pass")
                created = st.form_submit_button("Sign Up", use_container_width=True)

            if created:
                try:
                    sign_up(get_db(), new_email, new_password)
                except AuthError as e:
                    st.error(str(e))
                else:
                    st.success("✅ Account created. You can log in now.")

        if config.SHOW_DEMO_CREDENTIALS:
            st.caption("Demo: demo@example.com / demo1234")

    return st.session_state.get("authenticated", False)


if not check_login():
    st.stop()


# --- Data Loading ---
def get_ledger() -> Ledger:
    ledger = st.session_state.get("ledger")
    if ledger is None or ledger.user_id != st.session_state["user_id"]:
        ledger = Ledger(TransactionStore(get_db()), st.session_state["user_id"])
        result = ledger.refresh()
        if not result.ok:
            st.error(result.message)
        st.session_state["ledger"] = ledger
    return ledger


def clear_filters():
    for key in FILTER_KEYS:
        st.session_state.pop(key, None)


def sign_out():
    logger.info("User %s signed out", st.session_state.get("user_id"))
    for key in ["authenticated", "user_id", "email", "ledger", "editing_id", "show_add_form"] + FILTER_KEYS:
        st.session_state.pop(key, None)


ledger = get_ledger()
show_flash()

try:
    budgets = load_budgets(get_db(), ledger.user_id)
except StoreError as e:
    st.error(str(e))
    budgets = dict(config.DEFAULT_BUDGETS)


# --- Components ---
def transaction_form(editing: TransactionRecord = None):
    title = "Edit Transaction" if editing else "Add New Transaction"
    with st.form("transaction_form", clear_on_submit=editing is None):
        st.subheader(title)
        col1, col2 = st.columns(2)
        txn_type = col1.radio(
            "Type", ["expense", "income"], horizontal=True,
            index=1 if editing and editing.is_income else 0,
            format_func=str.title,
        )
        amount = col2.text_input("Amount", value=f"{editing.amount:g}" if editing else "", placeholder="0.00")
        description = st.text_area("Description", value=editing.description if editing else "",
                                   placeholder="What was this transaction for?", height=68)

        col3, col4 = st.columns(2)
        categories = list(DEFAULT_CATEGORIES)
        if editing and editing.category not in categories:
            categories.append(editing.category)
        category = col3.selectbox(
            "Category", categories,
            index=categories.index(editing.category) if editing else None,
            placeholder="Select category",
        )
        date_value = col4.date_input(
            "Date",
            value=date.fromisoformat(editing.date) if editing and editing.date else date.today(),
        )
        tags_text = st.text_input("Tags", value=", ".join(editing.tags) if editing else "",
                                  placeholder="Comma separated, e.g. essentials, monthly")

        c1, c2 = st.columns(2)
        submitted = c1.form_submit_button("Update Transaction" if editing else "Add Transaction", type="primary")
        cancelled = c2.form_submit_button("Cancel")

    if cancelled:
        st.session_state["show_add_form"] = False
        st.session_state["editing_id"] = None
        st.rerun()

    if submitted:
        tags = []
        for piece in tags_text.split(","):
            tags = add_tag(tags, piece)
        try:
            record = validate_entry(amount, description, category, date_value, txn_type, tags)
        except ValidationError as e:
            st.error(str(e))
            return

        result = ledger.edit(editing.id, record) if editing else ledger.add(record)
        if result.ok:
            flash(result.message)
            st.session_state["show_add_form"] = False
            st.session_state["editing_id"] = None
            st.rerun()
        else:
            st.error(result.message)


def transaction_card(record: TransactionRecord, key_prefix: str):
    with st.container(border=True):
        col1, col2, col3 = st.columns([6, 2, 2])
        with col1:
            st.markdown(f"🧾 **{record.description}**")
            color = category_color(record.category)
            badge = (
                f"<span style='border: 1px solid {color}; color: {color}; border-radius: 6px; "
                f"padding: 1px 6px; font-size: 12px;'>{record.category or 'Other'}</span>"
            )
            tags = " ".join(f"#{t}" for t in record.tags)
            st.markdown(f"{badge} &nbsp; {record.date} &nbsp; <small>{tags}</small>", unsafe_allow_html=True)
        with col2:
            sign = "+" if record.is_income else "-"
            color = "#22c55e" if record.is_income else "#ef4444"
            st.markdown(
                f"<div style='color: {color}; font-weight: 700; font-size: 18px;'>{sign}{config.CURRENCY_SYMBOL}{record.amount:,.2f}</div>",
                unsafe_allow_html=True,
            )
        with col3:
            b1, b2 = st.columns(2)
            if b1.button("✏️", key=f"{key_prefix}_edit_{record.id}", help="Edit"):
                st.session_state["editing_id"] = record.id
                st.session_state["show_add_form"] = False
                st.rerun()
            if b2.button("🗑️", key=f"{key_prefix}_del_{record.id}", help="Delete"):
                result = ledger.remove(record.id)
                if result.ok:
                    flash(result.message)
                    st.rerun()
                else:
                    st.error(result.message)


def current_filters() -> FilterSpec:
    """FilterSpec from the filter widgets' last submitted values."""
    state = st.session_state
    date_from = state.get("f_date_from")
    date_to = state.get("f_date_to")
    return FilterSpec(
        search=state.get("f_search") or "",
        category=state.get("f_category") or "",
        type=state.get("f_type") or "",
        date_from=date_from.isoformat() if date_from else "",
        date_to=date_to.isoformat() if date_to else "",
        min_amount=state.get("f_min") or "",
        max_amount=state.get("f_max") or "",
        tags=tuple(state.get("f_tags") or ()),
    )


def filters_panel() -> FilterSpec:
    col1, col2 = st.columns([5, 1])
    col1.text_input("Search", placeholder="Search transactions...", key="f_search", label_visibility="collapsed")
    if has_active_filters(current_filters()):
        col2.button("✖ Clear", on_click=clear_filters, use_container_width=True)

    with st.expander("Filters"):
        c1, c2, c3, c4 = st.columns(4)
        c1.selectbox("Category", [""] + available_categories(ledger.records), key="f_category",
                     format_func=lambda v: v or "All categories")
        c2.selectbox("Type", ["", "expense", "income"], key="f_type",
                     format_func=lambda v: {"": "All types", "expense": "Expenses", "income": "Income"}[v])
        c3.date_input("From", value=None, key="f_date_from")
        c4.date_input("To", value=None, key="f_date_to")

        a1, a2 = st.columns(2)
        a1.text_input(f"Min Amount ({config.CURRENCY_SYMBOL})", placeholder="0", key="f_min")
        a2.text_input(f"Max Amount ({config.CURRENCY_SYMBOL})", placeholder="∞", key="f_max")

        tag_options = available_tags(ledger.records)
        if tag_options:
            st.multiselect("Tags", tag_options, key="f_tags", format_func=lambda t: f"#{t}")

    return current_filters()


def stats_and_charts(key_prefix: str):
    today = date.today()
    summary = month_summary(ledger.records, today)
    totals = category_totals(ledger.records, today)
    progress = budget_progress(totals, budgets)

    kpis(summary, progress)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(income_vs_expense_monthly(monthly_series(ledger.records, today)), use_container_width=True, key=f"{key_prefix}_monthly")
    with col2:
        if totals:
            st.plotly_chart(cat_spend(totals), use_container_width=True, key=f"{key_prefix}_categories")
        else:
            st.info("No expense data for this month")
    st.plotly_chart(daily_spend(daily_series(ledger.records, today)), use_container_width=True, key=f"{key_prefix}_daily")


# --- Main App ---
with st.sidebar:
    st.header("Account")
    st.caption(f"Signed in as **{st.session_state.get('email')}**")
    if st.button("🔄 Refresh", use_container_width=True):
        result = ledger.refresh()
        if result.ok:
            flash(result.message, "🔄")
        else:
            st.error(result.message)
        st.rerun()
    if st.button("🚪 Logout", use_container_width=True, on_click=sign_out):
        st.rerun()

ledger.set_filters(current_filters())

head_left, head_right = st.columns([3, 2])
with head_left:
    st.title("💰 ExpenseTracker")
    st.caption("Manage your finances")
with head_right:
    b1, b2 = st.columns(2)
    b1.download_button(
        "⬇️ Export",
        data=ledger.export_csv(),
        file_name=EXPORT_FILENAME,
        mime="text/csv",
        use_container_width=True,
    )
    if b2.button("➕ Add Transaction", type="primary", use_container_width=True):
        st.session_state["show_add_form"] = True
        st.session_state["editing_id"] = None

editing = ledger.find(st.session_state.get("editing_id")) if st.session_state.get("editing_id") else None
if editing or st.session_state.get("show_add_form"):
    transaction_form(editing)

tab1, tab2, tab3, tab4 = st.tabs(["📈 Overview", "💳 Transactions", "📊 Analytics", "🎯 Budgets"])

with tab1:
    stats_and_charts("overview")
    st.subheader("Recent Transactions")
    recent = ledger.recent(5)
    if not recent:
        st.info("Start by adding your first transaction")
    for record in recent:
        transaction_card(record, "recent")

with tab2:
    ledger.set_filters(filters_panel())
    visible = ledger.visible()

    count_col, _ = st.columns([2, 3])
    active = active_filter_count(ledger.filters)
    count_col.markdown(f"## Transactions `{len(visible)} of {len(ledger.records)}`"
                       + (f" · {active} filters" if active else ""))

    if visible:
        for record in visible:
            transaction_card(record, "log")
    else:
        st.info("Start by adding your first transaction" if not ledger.records else "No transactions found. Try adjusting your filters")

with tab3:
    stats_and_charts("analytics")

with tab4:
    st.header("🎯 Category Budgets")
    progress = budget_progress(category_totals(ledger.records), budgets)
    if progress:
        budget_bars(progress)
    else:
        st.info("No budgets configured yet.")

    with st.expander("➕ Add or Update Budget"):
        with st.form("add_budget"):
            choice = st.selectbox("Category", DEFAULT_CATEGORIES)
            limit = st.number_input(f"Monthly limit ({config.CURRENCY_SYMBOL})", min_value=0.0, step=500.0)
            if st.form_submit_button("Save Budget"):
                try:
                    save_budget(get_db(), ledger.user_id, choice, limit)
                except StoreError as e:
                    st.error(str(e))
                else:
                    flash(f"Budget saved for {choice}.")
                    st.rerun()

    st.caption(f"Spent this month: {money(month_summary(ledger.records).expenses)}")
