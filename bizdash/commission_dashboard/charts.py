# bizdash/commission_dashboard/charts.py
"""
Altair Chart Builders and Cards for the Commission Dashboard

- KPI summary cards (st.metric)
- Per-salesperson commission cards
- Sales / net profit / commission by salesperson (grouped bars)
- Prorated fixed costs by category
"""

import logging
import pandas as pd
import altair as alt
import streamlit as st

from .constants import COLORS, CHART_WIDTH, CHART_HEIGHT
from .formatters import format_brl, format_percentage, plural_sales
from .models import CommissionDashboard

logger = logging.getLogger(__name__)


class CommissionCharts:
    """
    Chart builders for the commission dashboard.

    All methods are static - can be called without instantiation.

    Usage:
        CommissionCharts.render_kpi_cards(dashboard)
        chart = CommissionCharts.build_salesperson_chart(dashboard)
        st.altair_chart(chart, use_container_width=True)
    """

    # =========================================================================
    # KPI CARDS
    # =========================================================================

    @staticmethod
    def render_kpi_cards(dashboard: CommissionDashboard):
        """Six headline cards: revenue, sale costs, fixed costs, net, commissions, sellers."""
        col1, col2, col3, col4, col5, col6 = st.columns(6)

        with col1:
            st.metric(
                label="Receita Total",
                value=format_brl(dashboard.total_revenue, with_symbol=True),
                help="Vendas concluídas no período"
            )
        with col2:
            st.metric(
                label="Custos de Vendas",
                value=format_brl(dashboard.total_sale_costs, with_symbol=True),
                help="Transporte, tarifas, etc"
            )
        with col3:
            st.metric(
                label="Custos Fixos",
                value=format_brl(dashboard.total_fixed_costs, with_symbol=True),
                help="Salários, aluguel, etc. Proporcional aos meses selecionados"
            )
        with col4:
            st.metric(
                label="Lucro Líquido",
                value=format_brl(dashboard.net_profit, with_symbol=True),
                help="Receita - custos de vendas - custos fixos"
            )
        with col5:
            st.metric(
                label="Comissões Totais",
                value=format_brl(dashboard.total_commissions, with_symbol=True),
                help="Soma das comissões de vendedores com percentual > 0"
            )
        with col6:
            st.metric(
                label="Vendedores Ativos",
                value=f"{dashboard.active_sellers}",
                help="Com vendas concluídas no período"
            )

    # =========================================================================
    # SALESPERSON CARDS
    # =========================================================================

    @staticmethod
    def render_salesperson_cards(dashboard: CommissionDashboard):
        """Two-column grid with one card per active salesperson."""
        if not dashboard.salespersons:
            with st.container(border=True):
                st.markdown("Nenhum vendedor ativo cadastrado.")
                st.caption("Cadastre vendedores para acompanhar comissões.")
            return

        columns = st.columns(2)
        for index, person in enumerate(dashboard.salespersons):
            with columns[index % 2]:
                with st.container(border=True):
                    st.markdown(f"**{person.name}**")
                    if person.earns_commission:
                        rate = f"Comissão de {format_percentage(person.commission_percentage)}"
                    else:
                        rate = "Sem comissão"
                    st.caption(f"{plural_sales(person.sales_count)} • {rate}")

                    st.markdown(
                        f"Total de Vendas: **{format_brl(person.total_sales, with_symbol=True)}**  \n"
                        f"Custos das Vendas: **- {format_brl(person.total_cost, with_symbol=True)}**  \n"
                        f"Lucro Líquido: **{format_brl(person.net_profit, with_symbol=True)}**"
                    )
                    if person.earns_commission:
                        st.metric(
                            label=f"Comissão ({format_percentage(person.commission_percentage)} do lucro líquido)",
                            value=format_brl(person.commission, with_symbol=True),
                        )
                    st.caption(f"Média por venda: R$ {format_brl(person.average_sale)}")

    # =========================================================================
    # CHARTS
    # =========================================================================

    @staticmethod
    def build_salesperson_chart(dashboard: CommissionDashboard) -> alt.Chart:
        """Grouped bars of sales, net profit and commission per salesperson."""
        breakdown = dashboard.breakdown_df()
        if breakdown.empty:
            return CommissionCharts._empty_chart("Sem vendedores")

        measures = {
            'total_sales': 'Vendas',
            'net_profit': 'Lucro Líquido',
            'commission': 'Comissão',
        }
        long_df = breakdown.melt(
            id_vars=['name'],
            value_vars=list(measures.keys()),
            var_name='measure',
            value_name='value'
        )
        long_df['measure'] = long_df['measure'].map(measures)
        long_df['value'] = long_df['value'].astype(float)

        return alt.Chart(long_df).mark_bar().encode(
            x=alt.X('name:N', title='Vendedor', axis=alt.Axis(labelAngle=0)),
            xOffset='measure:N',
            y=alt.Y('value:Q', title='R$'),
            color=alt.Color(
                'measure:N',
                title='',
                scale=alt.Scale(
                    domain=list(measures.values()),
                    range=[COLORS['revenue'], COLORS['profit'], COLORS['commission']]
                )
            ),
            tooltip=[
                alt.Tooltip('name:N', title='Vendedor'),
                alt.Tooltip('measure:N', title='Medida'),
                alt.Tooltip('value:Q', title='R$', format=',.2f'),
            ]
        ).properties(width=CHART_WIDTH, height=CHART_HEIGHT)

    @staticmethod
    def build_fixed_cost_chart(dashboard: CommissionDashboard) -> alt.Chart:
        """Prorated fixed costs by category."""
        if not dashboard.fixed_costs_by_category:
            return CommissionCharts._empty_chart("Sem custos fixos no período")

        df = pd.DataFrame(
            [(category, float(value)) for category, value in dashboard.fixed_costs_by_category],
            columns=['category', 'value']
        )
        return alt.Chart(df).mark_bar(color=COLORS['fixed_costs']).encode(
            x=alt.X('value:Q', title='R$'),
            y=alt.Y('category:N', title='Categoria', sort='-x'),
            tooltip=[
                alt.Tooltip('category:N', title='Categoria'),
                alt.Tooltip('value:Q', title='R$', format=',.2f'),
            ]
        ).properties(width=CHART_WIDTH, height=max(120, 40 * len(df)))

    @staticmethod
    def _empty_chart(message: str) -> alt.Chart:
        return alt.Chart(pd.DataFrame({'text': [message]})).mark_text(
            size=14, color=COLORS['text_light']
        ).encode(text='text:N').properties(width=CHART_WIDTH, height=80)
