from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import database
from ledger import Ledger
from store import TransactionStore

from helpers import make_record

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture()
def patched_db(monkeypatch, engine, session_factory):
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(database, "SessionLocal", session_factory)


def test_login_page_renders(patched_db):
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    assert not at.exception
    assert [b.label for b in at.button] == ["Login", "Sign Up"]


def test_signed_in_user_sees_transactions(patched_db, db, user):
    TransactionStore(db).insert(make_record(description="Grocery shopping", amount=850), user.id)

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["authenticated"] = True
    at.session_state["user_id"] = user.id
    at.session_state["email"] = user.email
    at.run()

    assert not at.exception
    assert at.title[0].value == "💰 ExpenseTracker"
    assert any("Grocery shopping" in m.value for m in at.markdown)
    assert [m.label for m in at.metric][:3] == ["💰 Monthly Income", "💸 Monthly Expenses", "📊 Net Amount"]


def test_export_follows_the_filters_set_in_the_transactions_tab(patched_db, db, user, monkeypatch):
    store = TransactionStore(db)
    store.insert(make_record(description="Rent", category="Rent", amount=20000), user.id)
    store.insert(make_record(description="Coffee", amount=150), user.id)

    exported = []
    export_csv = Ledger.export_csv

    def recording_export(self):
        body = export_csv(self)
        exported.append(body)
        return body

    monkeypatch.setattr(Ledger, "export_csv", recording_export)

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["authenticated"] = True
    at.session_state["user_id"] = user.id
    at.session_state["email"] = user.email
    at.run()
    assert "Rent" in exported[-1]
    assert "✖ Clear" not in [b.label for b in at.button]

    at.text_input(key="f_max").set_value("1000").run()

    assert not at.exception
    assert "Coffee" in exported[-1]
    assert "Rent" not in exported[-1]
    assert "✖ Clear" in [b.label for b in at.button]
