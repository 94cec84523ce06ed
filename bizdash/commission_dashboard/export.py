# bizdash/commission_dashboard/export.py
"""
Formatted Excel Export for the Commission Dashboard

Creates an Excel report with:
- Summary sheet (company, period, headline figures)
- Salesperson breakdown with commission
- Prorated fixed costs by category

Uses openpyxl for formatting capabilities.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import List, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from .constants import EXCEL_STYLES
from .models import CommissionDashboard

logger = logging.getLogger(__name__)


class CommissionExport:
    """
    Excel report generator for the commission dashboard.

    Usage:
        exporter = CommissionExport()
        excel_bytes = exporter.create_report(dashboard, company_name="ACME")

        st.download_button(
            label="Baixar relatório",
            data=excel_bytes,
            file_name="comissoes.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
    """

    SUMMARY_SHEET = "Resumo"
    SALESPERSON_SHEET = "Vendedores"
    FIXED_COST_SHEET = "Custos Fixos"

    def __init__(self):
        """Initialize with default styles."""
        self.wb = None
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.header_font = Font(
            bold=True,
            color=EXCEL_STYLES['header_font_color'],
            size=11
        )
        self.title_font = Font(bold=True, size=16)
        self.subtitle_font = Font(bold=True, size=12)

        thin_border = Side(style='thin', color='000000')
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border
        )
        self.center_align = Alignment(horizontal='center', vertical='center')

        self.currency_format = EXCEL_STYLES['currency_format']
        self.percent_format = EXCEL_STYLES['percent_format']

    # =========================================================================
    # MAIN EXPORT METHOD
    # =========================================================================

    def create_report(self, dashboard: CommissionDashboard, company_name: str = "") -> BytesIO:
        """
        Create formatted Excel report.

        Args:
            dashboard: Aggregated dashboard
            company_name: Company shown on the summary sheet

        Returns:
            BytesIO containing Excel file
        """
        self.wb = Workbook()

        self._create_summary_sheet(dashboard, company_name)
        self._create_salesperson_sheet(dashboard)
        self._create_fixed_cost_sheet(dashboard)

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info(f"Excel report created for {company_name or 'company'} ({dashboard.window.label()})")
        return output

    # =========================================================================
    # SHEETS
    # =========================================================================

    def _create_summary_sheet(self, dashboard: CommissionDashboard, company_name: str):
        ws = self.wb.active
        ws.title = self.SUMMARY_SHEET

        row = 1
        ws.cell(row=row, column=1, value="Relatório de Comissões")
        ws.cell(row=row, column=1).font = self.title_font
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=3)
        row += 2

        info = [
            ("Empresa:", company_name),
            ("Período:", dashboard.window.label()),
            ("Gerado em:", datetime.now().strftime('%d/%m/%Y %H:%M')),
        ]
        for label, value in info:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
            row += 1
        row += 1

        ws.cell(row=row, column=1, value="Indicadores")
        ws.cell(row=row, column=1).font = self.subtitle_font
        row += 1

        figures = [
            ("Receita Total", dashboard.total_revenue),
            ("Custos de Vendas", dashboard.total_sale_costs),
            ("Custos Fixos", dashboard.total_fixed_costs),
            ("Lucro Líquido", dashboard.net_profit),
            ("Comissões Totais", dashboard.total_commissions),
        ]
        for label, value in figures:
            ws.cell(row=row, column=1, value=label)
            cell = ws.cell(row=row, column=2, value=float(value))
            cell.number_format = self.currency_format
            row += 1

        ws.cell(row=row, column=1, value="Vendas Concluídas")
        ws.cell(row=row, column=2, value=dashboard.completed_sales)
        row += 1
        ws.cell(row=row, column=1, value="Vendedores Ativos")
        ws.cell(row=row, column=2, value=dashboard.active_sellers)

        ws.column_dimensions['A'].width = 24
        ws.column_dimensions['B'].width = 28

    def _create_salesperson_sheet(self, dashboard: CommissionDashboard):
        ws = self.wb.create_sheet(self.SALESPERSON_SHEET)
        headers = [
            ("Vendedor", None),
            ("Comissão %", self.percent_format),
            ("Vendas", None),
            ("Total de Vendas", self.currency_format),
            ("Custos", self.currency_format),
            ("Lucro Líquido", self.currency_format),
            ("Comissão", self.currency_format),
            ("Média por Venda", self.currency_format),
        ]
        rows = [
            [
                person.name,
                float(person.commission_percentage),
                person.sales_count,
                float(person.total_sales),
                float(person.total_cost),
                float(person.net_profit),
                float(person.commission),
                float(person.average_sale),
            ]
            for person in dashboard.salespersons
        ]
        self._write_table(ws, headers, rows)

    def _create_fixed_cost_sheet(self, dashboard: CommissionDashboard):
        ws = self.wb.create_sheet(self.FIXED_COST_SHEET)
        headers = [("Categoria", None), ("Valor no Período", self.currency_format)]
        rows = [[category, float(value)] for category, value in dashboard.fixed_costs_by_category]
        self._write_table(ws, headers, rows)

    def _write_table(self, ws, headers: List[Tuple[str, str]], rows: List[list]):
        for col_idx, (title, _) in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=title)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.border = self.cell_border
            cell.alignment = self.center_align
            ws.column_dimensions[get_column_letter(col_idx)].width = max(14, len(title) + 4)

        for row_idx, values in enumerate(rows, start=2):
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border
                number_format = headers[col_idx - 1][1]
                if number_format:
                    cell.number_format = number_format

        ws.freeze_panes = 'A2'
