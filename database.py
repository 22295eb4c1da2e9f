"""
SQLite database layer for the EDGAR funding system.

Stores Company aggregates: one row per company plus one row per yearly
income. An aggregate is always written in a single transaction, so a company
never exists in the store without its incomes.

Usage:
    from database import DatabaseManager
    db = DatabaseManager()
    db.add_company(company)
    companies = db.get_all_companies(name_starts_with="A")
"""

import os
import sqlite3
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from api.config import settings
from models import Company, Currency, Income, Money


DEFAULT_DB_PATH = settings.DB_PATH


# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS companies (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    cik   INTEGER NOT NULL UNIQUE,
    name  TEXT NOT NULL
);

-- value is a decimal string so amounts round-trip exactly
CREATE TABLE IF NOT EXISTS incomes (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id  INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    year        INTEGER NOT NULL,
    value       TEXT NOT NULL,
    currency    TEXT NOT NULL DEFAULT 'USD',
    UNIQUE(company_id, year)
);

CREATE INDEX IF NOT EXISTS idx_companies_name ON companies(name);
CREATE INDEX IF NOT EXISTS idx_incomes_company ON incomes(company_id, year);
"""


class DatabaseManager:
    """SQLite store for Company aggregates."""

    def __init__(self, db_path: str = None, check_same_thread: bool = True):
        db_path = db_path or DEFAULT_DB_PATH
        if db_path != ":memory:" and os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path, check_same_thread=check_same_thread)
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self.conn.row_factory = sqlite3.Row
        self._create_schema()

    def _create_schema(self):
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()

    def close(self):
        self.conn.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_company(self, company_id: int) -> Optional[Company]:
        companies = self._fetch_companies("WHERE id = ?", (company_id,))
        return companies[0] if companies else None

    def get_company_by_cik(self, cik: int) -> Optional[Company]:
        companies = self._fetch_companies("WHERE cik = ?", (cik,))
        return companies[0] if companies else None

    def get_all_companies(self, name_starts_with: Optional[str] = None) -> list[Company]:
        """
        All companies with their incomes, ordered by id.

        Args:
            name_starts_with: Optional case-sensitive name prefix. None or a
                blank string returns every company.
        """
        if name_starts_with and name_starts_with.strip():
            return self._fetch_companies(
                "WHERE substr(name, 1, ?) = ?",
                (len(name_starts_with), name_starts_with),
            )
        return self._fetch_companies("", ())

    def company_exists(self, cik: int) -> bool:
        cur = self.conn.execute("SELECT 1 FROM companies WHERE cik = ? LIMIT 1", (cik,))
        return cur.fetchone() is not None

    def _fetch_companies(self, where: str, params: tuple) -> list[Company]:
        company_rows = self.conn.execute(
            f"SELECT id, cik, name FROM companies {where} ORDER BY id", params
        ).fetchall()
        if not company_rows:
            return []

        income_rows = self.conn.execute(
            f"""
            SELECT company_id, year, value, currency FROM incomes
            WHERE company_id IN (SELECT id FROM companies {where})
            ORDER BY company_id, year
            """,
            params,
        ).fetchall()

        incomes_by_company = defaultdict(list)
        for r in income_rows:
            incomes_by_company[r["company_id"]].append(Income(
                company_id=r["company_id"],
                year=r["year"],
                amount=Money(amount=Decimal(r["value"]), currency=Currency(r["currency"])),
            ))

        companies = []
        for row in company_rows:
            company = Company(id=row["id"], cik=row["cik"], name=row["name"])
            for income in incomes_by_company[row["id"]]:
                company.add_income(income)
            companies.append(company)
        return companies

    # ------------------------------------------------------------------
    # Writes (one transaction per aggregate)
    # ------------------------------------------------------------------

    def add_company(self, company: Company) -> Company:
        """Insert a company with all its incomes and assign its id."""
        with self.conn:
            cur = self.conn.execute(
                "INSERT INTO companies (cik, name) VALUES (?, ?)",
                (company.cik, company.name),
            )
            company_id = cur.lastrowid
            self._insert_incomes(company_id, company.incomes)
        company.assign_id(company_id)
        return company

    def update_company(self, company: Company) -> None:
        """Overwrite a stored company's name and replace its incomes."""
        if not company.id:
            raise ValueError(f"Company CIK {company.cik} has not been persisted")
        with self.conn:
            cur = self.conn.execute(
                "UPDATE companies SET cik = ?, name = ? WHERE id = ?",
                (company.cik, company.name, company.id),
            )
            if cur.rowcount == 0:
                raise ValueError(f"Company {company.id} does not exist")
            self.conn.execute("DELETE FROM incomes WHERE company_id = ?", (company.id,))
            self._insert_incomes(company.id, company.incomes)
        company.assign_id(company.id)

    def delete_company(self, company: Company) -> None:
        """Delete a company; its incomes go with it (ON DELETE CASCADE)."""
        with self.conn:
            self.conn.execute("DELETE FROM companies WHERE id = ?", (company.id,))

    def _insert_incomes(self, company_id: int, incomes: list[Income]) -> None:
        self.conn.executemany(
            "INSERT INTO incomes (company_id, year, value, currency) VALUES (?, ?, ?, ?)",
            [
                (company_id, i.year, str(i.amount.amount), i.amount.currency.value)
                for i in incomes
            ],
        )

    # ------------------------------------------------------------------
    # Stats / generic query
    # ------------------------------------------------------------------

    def get_database_stats(self) -> dict:
        cur = self.conn.execute(
            "SELECT (SELECT COUNT(*) FROM companies) AS companies, "
            "(SELECT COUNT(*) FROM incomes) AS incomes"
        )
        return dict(cur.fetchone())

    def query(self, sql: str, params: tuple = ()) -> list[dict]:
        """Execute a raw SQL query and return results as list of dicts."""
        cur = self.conn.execute(sql, params)
        return [dict(r) for r in cur.fetchall()]
