# bizdash/commission_dashboard/filters.py
"""
Sidebar Filter Components for the Commission Dashboard

Renders filter UI elements:
- Company selector
- Year selector
- Month multiselect (empty = whole year)
"""

import logging
from typing import Any, Dict, List
import pandas as pd
import streamlit as st

from bizdash.config import local_today
from .constants import MONTH_NAMES_PT, YEAR_OPTIONS
from .models import MonthWindow

logger = logging.getLogger(__name__)


class CommissionFilters:
    """
    Sidebar filters for the commission dashboard.

    Usage:
        filters = CommissionFilters(companies_df)
        values = filters.render_all_filters()
        window = values['window']
    """

    def __init__(self, companies_df: pd.DataFrame):
        self.companies_df = companies_df

    def render_all_filters(self) -> Dict[str, Any]:
        """
        Render all sidebar filters and return selected values.

        Returns:
            {
                'company_id': Any or None,
                'company_name': str,
                'window': MonthWindow,
            }
        """
        st.sidebar.header("🎛️ Filtros")

        company_id, company_name = self.render_company_selector()

        st.sidebar.divider()

        year = self._render_year_selector()
        months = self._render_month_selector()

        window = MonthWindow.of(year, months)
        st.sidebar.caption(f"Período: {window.label()}")

        return {
            'company_id': company_id,
            'company_name': company_name,
            'window': window,
        }

    def render_company_selector(self):
        """Company selectbox, remembered in session_state['company_id']."""
        if self.companies_df.empty:
            st.sidebar.warning("Nenhuma empresa cadastrada.")
            return None, ""

        options = self.companies_df['id'].tolist()
        names = dict(zip(self.companies_df['id'], self.companies_df['name']))

        current = st.session_state.get('company_id')
        index = options.index(current) if current in options else 0

        company_id = st.sidebar.selectbox(
            "Empresa",
            options=options,
            index=index,
            format_func=lambda cid: names.get(cid, str(cid)),
            key="filter_company",
        )
        st.session_state['company_id'] = company_id
        return company_id, names.get(company_id, "")

    def _render_year_selector(self) -> int:
        current_year = local_today().year
        default = current_year if current_year in YEAR_OPTIONS else YEAR_OPTIONS[-1]
        return st.sidebar.selectbox(
            "Ano",
            options=YEAR_OPTIONS,
            index=YEAR_OPTIONS.index(default),
            key="filter_year",
        )

    def _render_month_selector(self) -> List[int]:
        return st.sidebar.multiselect(
            "Meses",
            options=list(range(12)),
            default=[],
            format_func=lambda m: MONTH_NAMES_PT[m],
            placeholder="Selecionar meses",
            help="Nenhum mês selecionado = ano inteiro",
            key="filter_months",
        )

