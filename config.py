import os
from dotenv import load_dotenv

load_dotenv()

# Default to local SQLite, but allow override for a hosted Postgres
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///expense_tracker.db")
LOG_LEVEL = os.getenv("EXPENSE_TRACKER_LOG_LEVEL")

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")
SHOW_DEMO_CREDENTIALS = os.getenv("SHOW_DEMO_CREDENTIALS", "false").lower() == "true"

# Used until a user saves budgets of their own
DEFAULT_BUDGETS = {
    "Food": 15000.0,
    "Transport": 5000.0,
    "Entertainment": 3000.0,
    "Utilities": 8000.0,
}

MONTHLY_WINDOW = 6
DAILY_WINDOW = 30
