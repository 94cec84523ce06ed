# app.py
"""
Business Dashboard - Main Entry Point

Landing page: database status, company selection and links to the
commission and ledger dashboards.

Version: 1.0.0
"""

import streamlit as st
from bizdash.config import config
from bizdash.db import check_db_connection, get_connection_pool_status
from bizdash.commission_dashboard import load_companies
import logging

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.is_feature_enabled("DEBUG_MODE") else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Painel de Gestão"
APP_ICON = "📊"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #1f77b4;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .info-card {
        background: #f8f9fa;
        padding: 1.5rem;
        border-radius: 0.5rem;
        border-left: 4px solid #1f77b4;
        margin-bottom: 1rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)


# ==================== HELPER FUNCTIONS ====================

def show_company_selector():
    """Pick the working company; pages read it from session_state['company_id']."""
    companies = load_companies()
    if companies.empty:
        st.warning("Nenhuma empresa cadastrada.")
        return

    options = companies['id'].tolist()
    names = dict(zip(companies['id'], companies['name']))
    current = st.session_state.get('company_id')

    company_id = st.selectbox(
        "Empresa",
        options=options,
        index=options.index(current) if current in options else 0,
        format_func=lambda cid: names.get(cid, str(cid)),
    )
    st.session_state['company_id'] = company_id
    logger.debug(f"Company selected: {company_id}")


def show_main_app():
    """Display the landing page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Vendas, custos e comissões por empresa</p>', unsafe_allow_html=True)

    db_ok, db_error = check_db_connection()
    if not db_ok:
        st.error(f"⚠️ {db_error}")
        st.info("Verifique a configuração do banco de dados (.env ou secrets).")
        return

    show_company_selector()

    st.markdown("### 📊 Painéis Disponíveis")

    st.markdown("""
    <div class="info-card">
        <strong>💰 Comissões</strong><br>
        <span style="color: #666;">Receita, custos de vendas, custos fixos proporcionais, lucro líquido e comissão por vendedor.</span>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("""
    <div class="info-card">
        <strong>📒 Livro-Caixa</strong><br>
        <span style="color: #666;">Vendas por status, valores a receber, custos fixos, contratos e estoque.</span>
    </div>
    """, unsafe_allow_html=True)

    if config.is_feature_enabled("DEBUG_MODE"):
        st.markdown("---")
        with st.expander("🔧 Status do Sistema"):
            pool_status = get_connection_pool_status()

            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Banco", pool_status.get("status", "OK"))
            with col2:
                st.metric("Conexões em uso", pool_status.get("checked_out", 0))
            with col3:
                st.metric("Disponíveis", pool_status.get("checked_in", 0))
            st.caption(config.get_masked_database_url())

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    show_main_app()


if __name__ == "__main__":
    main()
