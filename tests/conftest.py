"""
Shared fixtures: a seeded SQLite database file and in-memory frames.

A file (not :memory:) database is used because dashboard loads read
through a thread pool and every SQLite :memory: connection is a
separate, empty database.
"""

import pandas as pd
import pytest
from sqlalchemy import create_engine, text

from bizdash.commission_dashboard.models import DashboardInputs, MonthWindow


SCHEMA = [
    """
    CREATE TABLE companies (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        code TEXT
    )
    """,
    """
    CREATE TABLE salespersons (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        commission_percentage NUMERIC,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE sales (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        order_number TEXT,
        customer_name TEXT,
        sale_date TEXT NOT NULL,
        total_price NUMERIC NOT NULL,
        entry_value NUMERIC,
        status TEXT NOT NULL,
        payment_status TEXT,
        notes TEXT
    )
    """,
    """
    CREATE TABLE sale_items (
        id INTEGER PRIMARY KEY,
        sale_id INTEGER NOT NULL,
        product_name TEXT,
        quantity INTEGER,
        unit_price NUMERIC
    )
    """,
    """
    CREATE TABLE sale_costs (
        id INTEGER PRIMARY KEY,
        sale_id INTEGER NOT NULL,
        cost_type TEXT,
        description TEXT,
        amount NUMERIC NOT NULL
    )
    """,
    """
    CREATE TABLE sale_salespersons (
        sale_id INTEGER NOT NULL,
        salesperson_id INTEGER NOT NULL,
        commission_percentage NUMERIC
    )
    """,
    """
    CREATE TABLE fixed_costs (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        name TEXT,
        category TEXT,
        monthly_value NUMERIC NOT NULL,
        start_date TEXT,
        qtdmonths INTEGER,
        description TEXT
    )
    """,
    """
    CREATE TABLE costs (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        category TEXT,
        description TEXT,
        amount NUMERIC NOT NULL,
        cost_date TEXT,
        payment_method TEXT
    )
    """,
    """
    CREATE TABLE contracts (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        monthly_value NUMERIC NOT NULL,
        start_date TEXT,
        discount NUMERIC,
        description TEXT
    )
    """,
    """
    CREATE TABLE inventory (
        id INTEGER PRIMARY KEY,
        company_id INTEGER NOT NULL,
        product_name TEXT NOT NULL,
        quantity INTEGER,
        unit_cost NUMERIC,
        total_value NUMERIC,
        location TEXT
    )
    """,
]

SEED = [
    "INSERT INTO companies VALUES (1, 'Alpha Comércio', 'ALP'), (2, 'Beta Serviços', 'BET')",
    """
    INSERT INTO salespersons VALUES
        (1, 1, 'Ana', 10, 1),
        (2, 1, 'Bruno', 0, 1),
        (3, 1, 'Carla', 5, 0),
        (4, 2, 'Diego', 20, 1)
    """,
    """
    INSERT INTO sales VALUES
        (1, 1, 'PED-001', 'João Silva', '2026-01-10', 1000.00, 1000.00, 'concluída', 'pago', NULL),
        (2, 1, 'PED-002', 'Maria Souza', '2026-02-15', 500.00, 100.00, 'concluída', 'pendente', NULL),
        (3, 1, 'PED-003', 'Pedro Lima', '2026-03-05', 300.00, 0, 'pendente', 'pendente', NULL),
        (4, 1, 'PED-004', 'Ana Costa', '2025-12-20', 800.00, 800.00, 'concluída', 'pendente', NULL),
        (5, 2, 'PED-005', 'Outro Cliente', '2026-01-05', 999.00, 0, 'concluída', 'pendente', NULL)
    """,
    """
    INSERT INTO sale_items (sale_id, product_name, quantity, unit_price) VALUES
        (1, 'Cadeira', 2, 250.00),
        (1, 'Mesa', 1, 500.00),
        (2, 'Cadeira', 3, 166.67),
        (3, 'Mesa', 1, 300.00)
    """,
    """
    INSERT INTO sale_costs (sale_id, cost_type, description, amount) VALUES
        (1, 'frete', 'Transporte', 100.00),
        (1, 'taxa', 'Cartão', 50.00),
        (2, 'frete', 'Transporte', 50.00),
        (3, 'frete', 'Transporte', 10.00)
    """,
    """
    INSERT INTO sale_salespersons VALUES
        (1, 1, NULL),
        (2, 1, 10),
        (2, 2, 0),
        (3, 1, 10),
        (4, 1, 10),
        (5, 4, 20)
    """,
    """
    INSERT INTO fixed_costs VALUES
        (1, 1, 'Aluguel', 'Fixo', 100.00, '2025-11-01', 4, NULL),
        (2, 1, 'Internet', 'Variável', 50.00, '2026-01-01', 12, NULL),
        (3, 2, 'Aluguel', 'Fixo', 999.00, '2026-01-01', 12, NULL)
    """,
    """
    INSERT INTO costs VALUES
        (1, 1, 'Marketing', 'Anúncios', 120.00, '2026-01-08', 'pix'),
        (2, 1, 'Manutenção', 'Conserto', 80.50, '2026-01-20', 'cartão'),
        (3, 1, 'Marketing', 'Panfletos', 40.00, '2026-02-02', 'dinheiro'),
        (4, 1, NULL, 'Diversos', 9.50, '2026-02-10', NULL),
        (5, 2, 'Marketing', 'Outra empresa', 999.00, '2026-01-01', 'pix')
    """,
    """
    INSERT INTO contracts VALUES
        (1, 1, 'Manutenção', 300.00, '2026-01-15', 30.00, 'Contrato mensal'),
        (2, 1, 'Suporte', 200.00, '2026-02-01', NULL, NULL)
    """,
    """
    INSERT INTO inventory VALUES
        (1, 1, 'Cadeira', 10, 50.00, 500.00, 'Depósito'),
        (2, 1, 'Mesa', 2, 300.00, 600.00, 'Loja')
    """,
]


@pytest.fixture
def engine(tmp_path):
    """SQLite engine on a seeded database file."""
    db_engine = create_engine(f"sqlite:///{tmp_path / 'bizdash.db'}")
    with db_engine.begin() as conn:
        for statement in SCHEMA + SEED:
            conn.execute(text(statement))
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def roster():
    return pd.DataFrame([
        {'id': 1, 'company_id': 1, 'name': 'Ana', 'commission_percentage': 10, 'is_active': True},
        {'id': 2, 'company_id': 1, 'name': 'Bruno', 'commission_percentage': 0, 'is_active': True},
    ])


@pytest.fixture
def sales():
    return pd.DataFrame([
        {'id': 1, 'sale_date': '2026-01-10', 'total_price': 1000.00, 'status': 'concluída'},
        {'id': 2, 'sale_date': '2026-02-15', 'total_price': 500.00, 'status': 'concluída'},
    ])


@pytest.fixture
def sale_costs():
    return pd.DataFrame([
        {'id': 1, 'sale_id': 1, 'amount': 100.00},
        {'id': 2, 'sale_id': 1, 'amount': 50.00},
        {'id': 3, 'sale_id': 2, 'amount': 50.00},
    ])


@pytest.fixture
def links():
    return pd.DataFrame([
        {'sale_id': 1, 'salesperson_id': 1, 'commission_percentage': None},
        {'sale_id': 2, 'salesperson_id': 1, 'commission_percentage': 10},
        {'sale_id': 2, 'salesperson_id': 2, 'commission_percentage': 0},
    ])


@pytest.fixture
def fixed_costs():
    return pd.DataFrame([
        {'id': 1, 'category': 'Fixo', 'monthly_value': 100.00, 'start_date': '2025-11-01', 'qtdmonths': 4},
        {'id': 2, 'category': 'Variável', 'monthly_value': 50.00, 'start_date': '2026-01-01', 'qtdmonths': 12},
    ])


@pytest.fixture
def make_inputs(sales, sale_costs, links, roster, fixed_costs):
    """Build DashboardInputs for a window from the frame fixtures."""
    from bizdash.commission_dashboard.metrics import summarize_sale_splits

    def _make(year=2026, months=(0, 1), **overrides):
        window = MonthWindow.of(year, months)
        frames = {
            'sales': sales,
            'sale_costs': sale_costs,
            'fixed_costs': fixed_costs,
            'salespersons': roster,
        }
        frames.update(overrides)
        summary = overrides.get('salesperson_summary')
        if summary is None:
            summary = summarize_sale_splits(
                frames['sales'], frames['sale_costs'], links, frames['salespersons'], window
            )
        frames['salesperson_summary'] = summary
        return DashboardInputs(company_id=1, window=window, **frames)

    return _make
