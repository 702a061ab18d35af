#!/usr/bin/env python3
"""
Database mock data population script for the expense tracker.

Creates a demo account with a month of sample income and expenses, useful
to try the API (login, listing, filters, summary) against a populated
database.

⚠️  WARNING: This is MOCK DATA for testing only!
    - User: demo@example.com / Password123
    - Transactions: salary, rent, groceries, freelance work, ...

⚠️  DATABASE BEHAVIOR:
    - If the demo user already exists → script ABORTS with error
    - Use --force flag to DELETE the demo user and its transactions first
    - Other users are never touched

Usage:
    python -m backend.test_scripts.test_db.populate_mock_data
    python -m backend.test_scripts.test_db.populate_mock_data --force
"""

# Setup test database BEFORE importing app modules
from backend.test_scripts.test_db_config import setup_test_database, initialize_test_database

setup_test_database(fresh=False)

import argparse  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Dict, List, Optional  # noqa: E402

from sqlmodel import Session, delete, select  # noqa: E402

from backend.app.db import Transaction, User, get_sync_engine  # noqa: E402
from backend.app.schemas.common import validate_input  # noqa: E402
from backend.app.schemas.transactions import TXCreateItem  # noqa: E402
from backend.app.utils.security import hash_password  # noqa: E402
from backend.app.utils.validation_utils import sanitize_description  # noqa: E402

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "Password123"

MOCK_TRANSACTIONS: List[dict] = [
    {"type": "INCOME", "amount": 5000.00, "description": "Monthly Salary", "date": "2023-12-01"},
    {"type": "EXPENSE", "amount": 1200.00, "description": "Rent Payment", "date": "2023-12-01"},
    {"type": "EXPENSE", "amount": 300.50, "description": "Groceries", "date": "2023-12-02"},
    {"type": "EXPENSE", "amount": 50.00, "description": "Gas Station", "date": "2023-12-03"},
    {"type": "INCOME", "amount": 200.00, "description": "Freelance Work", "date": "2023-12-05"},
    {"type": "EXPENSE", "amount": 75.25, "description": "Restaurant", "date": "2023-12-06"},
    {"type": "EXPENSE", "amount": 120.00, "description": "Utilities", "date": "2023-12-07"},
    {"type": "INCOME", "amount": 150.00, "description": "Gift", "date": "2023-12-10"},
    ]


def find_demo_user(session: Session) -> Optional[User]:
    return session.exec(select(User).where(User.email == DEMO_EMAIL)).first()


def remove_demo_user(session: Session) -> None:
    """Delete the demo user and its transactions (children first)."""
    user = find_demo_user(session)
    if user is None:
        return
    print(f"\n🗑️  Removing existing demo user (id={user.id})...")
    session.execute(delete(Transaction).where(Transaction.user_id == user.id))
    session.execute(delete(User).where(User.id == user.id))
    session.commit()


def populate_demo_user(session: Session) -> User:
    print("\n👤 Creating demo user...")
    user = User(email=DEMO_EMAIL, password=hash_password(DEMO_PASSWORD))
    session.add(user)
    session.flush()
    print(f"  ✅ {user.email} (id={user.id})")
    return user


def populate_transactions(session: Session, user: User) -> int:
    """Insert the sample transactions; every row goes through the create schema."""
    print("\n💸 Creating transactions...")
    for raw in MOCK_TRANSACTIONS:
        check = validate_input(TXCreateItem, raw)
        if not check.success:
            raise ValueError(f"Invalid mock transaction {raw}: {check.first_error}")
        item = check.data
        session.add(Transaction(
            user_id=user.id,
            type=item.type,
            amount=item.amount,
            description=sanitize_description(item.description),
            date=item.date,
            ))
        print(f"  ✅ {item.date} {item.type.value:<7} {item.amount:>10} {item.description}")
    return len(MOCK_TRANSACTIONS)


def expected_totals() -> Dict[str, Decimal]:
    income = sum((Decimal(str(t["amount"])) for t in MOCK_TRANSACTIONS if t["type"] == "INCOME"), Decimal("0"))
    expense = sum((Decimal(str(t["amount"])) for t in MOCK_TRANSACTIONS if t["type"] == "EXPENSE"), Decimal("0"))
    return {"total_income": income, "total_expense": expense, "balance": income - expense}


def main(argv=None) -> int:
    """Populate database with mock data for testing."""
    parser = argparse.ArgumentParser(description="Populate database with mock data")
    parser.add_argument("--force", action="store_true",
                        help="Delete the existing demo user and recreate it")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("Expense Tracker Database - Mock Data Population")
    print("=" * 60)

    print("\n🔧 Initializing database...")
    if not initialize_test_database():
        return 1

    with Session(get_sync_engine()) as session:
        try:
            if find_demo_user(session) is not None:
                if not args.force:
                    print(f"\n❌ Error: Demo user {DEMO_EMAIL} already exists!")
                    print("\n💡 Use --force flag to delete and recreate it:")
                    print("     python -m backend.test_scripts.test_db.populate_mock_data --force")
                    return 1
                remove_demo_user(session)

            user = populate_demo_user(session)
            count = populate_transactions(session, user)

            print("\n💾 Committing all data to database...")
            session.commit()

            totals = expected_totals()
            print("\n📊 Summary:")
            print(f"  • {count} transactions")
            print(f"  • income {totals['total_income']}, expense {totals['total_expense']}, "
                  f"balance {totals['balance']}")
            print(f"\n✅ Login with {DEMO_EMAIL} / {DEMO_PASSWORD}")
            return 0

        except Exception as e:
            print(f"\n❌ Error: {e}")
            session.rollback()
            return 1


if __name__ == "__main__":
    exit(main())
