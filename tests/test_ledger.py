"""
Tests for the ledger overview summaries.
"""
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from bizdash.ledger import (
    LedgerData,
    LedgerMetrics,
    LedgerQueries,
    can_confirm_payment,
    filter_contracts,
    filter_sales,
    is_cash_sale,
    remaining_balance,
)


@pytest.fixture
def ledger(engine):
    return LedgerQueries(1, engine).load_ledger()


@pytest.fixture
def metrics(ledger):
    return LedgerMetrics(ledger)


class TestReceivables:

    def test_paid_sale_has_nothing_remaining(self):
        assert remaining_balance(500, 100, 'pago') == Decimal('0.00')

    def test_remaining_is_total_minus_entry(self):
        assert remaining_balance(500, 100, 'pendente') == Decimal('400.00')

    def test_entry_above_total_clamps_to_zero(self):
        assert remaining_balance(100, 150, 'pendente') == Decimal('0.00')

    def test_missing_entry_counts_as_zero(self):
        assert remaining_balance(300, None, 'pendente') == Decimal('300.00')

    def test_cash_sale(self):
        assert is_cash_sale(800, 800.0)
        assert not is_cash_sale(800, 0)

    def test_can_confirm_payment(self):
        assert can_confirm_payment(500, 100, 'pendente')
        assert not can_confirm_payment(500, 100, 'pago')
        assert not can_confirm_payment(800, 800, 'pendente')

    def test_company_total(self, metrics):
        assert metrics.total_receivable() == Decimal('700.00')


class TestSales:

    def test_loads_every_status(self, ledger):
        assert sorted(ledger.sales['id'].tolist()) == [1, 2, 3, 4]
        assert len(ledger.sale_items) == 4

    def test_status_summary(self, metrics):
        summary = metrics.sales_status_summary()

        assert summary['completed'] == {
            'revenue': Decimal('2300.00'),
            'costs': Decimal('200.00'),
            'net_profit': Decimal('2100.00'),
            'count': 3,
            'items_sold': 6,
        }
        assert summary['pending'] == {
            'revenue': Decimal('300.00'),
            'costs': Decimal('10.00'),
            'net_profit': Decimal('290.00'),
            'count': 1,
            'items_sold': 1,
        }

    def test_details(self, metrics):
        details = metrics.sale_details().set_index('id')

        assert details.loc[1, 'product_names'] == 'Cadeira, Mesa'
        assert details.loc[1, 'items_quantity'] == 3
        assert details.loc[1, 'total_costs'] == Decimal('150.00')
        assert details.loc[4, 'product_names'] == ''
        assert bool(details.loc[4, 'is_cash_sale'])
        assert bool(details.loc[2, 'can_confirm_payment'])

    def test_search_by_product(self, metrics):
        found = filter_sales(metrics.sale_details(), search='MESA')
        assert sorted(found['id'].tolist()) == [1, 3]

    def test_search_by_customer_and_order(self, metrics):
        details = metrics.sale_details()

        assert filter_sales(details, search='souza')['id'].tolist() == [2]
        assert filter_sales(details, search='ped-004')['id'].tolist() == [4]

    def test_month_filter(self, metrics):
        assert filter_sales(metrics.sale_details(), month='2026-02')['id'].tolist() == [2]

    def test_only_with_remaining(self, metrics):
        found = filter_sales(metrics.sale_details(), only_with_remaining=True)
        assert sorted(found['id'].tolist()) == [2, 3]

    def test_no_sales(self):
        metrics = LedgerMetrics(LedgerData(company_id=1))
        summary = metrics.sales_status_summary()

        assert summary['completed']['count'] == 0
        assert summary['pending']['revenue'] == Decimal('0.00')
        assert metrics.total_receivable() == Decimal('0.00')
        assert filter_sales(metrics.sale_details(), search='x').empty


class TestFixedCosts:

    def test_totals_for_month(self, metrics):
        totals = metrics.fixed_cost_totals(reference=date(2026, 1, 15))

        assert totals['monthly'] == Decimal('150.00')
        assert totals['annual'] == Decimal('1800.00')
        assert totals['count'] == 2
        assert totals['active_count'] == 2
        assert totals['by_category'] == {'Fixo': Decimal('100.00'), 'Variável': Decimal('50.00')}

    def test_expired_cost_not_counted(self, metrics):
        totals = metrics.fixed_cost_totals(reference=date(2026, 3, 10))

        assert totals['monthly'] == Decimal('50.00')
        assert totals['count'] == 2
        assert totals['active_count'] == 1

    def test_no_fixed_costs(self):
        totals = LedgerMetrics(LedgerData(company_id=1)).fixed_cost_totals(reference=date(2026, 1, 1))
        assert totals['monthly'] == Decimal('0.00')
        assert totals['by_category'] == {}


class TestContracts:

    def test_totals(self, metrics):
        totals = metrics.contract_totals()

        assert totals == {
            'gross_monthly': Decimal('500.00'),
            'total_discount': Decimal('30.00'),
            'net_monthly': Decimal('470.00'),
            'count': 2,
        }

    def test_search(self, ledger):
        assert filter_contracts(ledger.contracts, search='suporte')['name'].tolist() == ['Suporte']
        assert filter_contracts(ledger.contracts, search='MENSAL')['name'].tolist() == ['Manutenção']

    def test_month_filter_and_filtered_totals(self, ledger, metrics):
        january = filter_contracts(ledger.contracts, month='2026-01')
        totals = metrics.contract_totals(january)

        assert january['name'].tolist() == ['Manutenção']
        assert totals['net_monthly'] == Decimal('270.00')


class TestInventory:

    def test_totals(self, metrics):
        assert metrics.inventory_totals() == {
            'total_value': Decimal('1100.00'),
            'total_items': 12,
            'product_count': 2,
        }

    def test_empty(self):
        totals = LedgerMetrics(LedgerData(company_id=1, inventory=pd.DataFrame())).inventory_totals()
        assert totals['product_count'] == 0


class TestGeneralCosts:

    def test_loaded_for_company_only(self, ledger):
        assert ledger.costs['id'].tolist() == [4, 3, 2, 1]

    def test_totals(self, metrics):
        totals = metrics.cost_totals()

        assert totals['total'] == Decimal('250.00')
        assert totals['count'] == 4
        assert totals['by_category'] == {
            'Manutenção': Decimal('80.50'),
            'Marketing': Decimal('160.00'),
            'Sem categoria': Decimal('9.50'),
        }
        assert totals['top_category'] == ('Marketing', Decimal('160.00'))

    def test_top_category_tie_goes_to_first_name(self):
        costs = pd.DataFrame([
            {'id': 1, 'category': 'Obras', 'amount': 50.00},
            {'id': 2, 'category': 'Aluguel', 'amount': 50.00},
        ])
        totals = LedgerMetrics(LedgerData(company_id=1, costs=costs)).cost_totals()
        assert totals['top_category'] == ('Aluguel', Decimal('50.00'))

    def test_no_costs(self):
        totals = LedgerMetrics(LedgerData(company_id=1)).cost_totals()

        assert totals == {'total': Decimal('0.00'), 'count': 0, 'by_category': {}, 'top_category': None}
