"""
Streamlit UI for the Item Value Engine.

Features:
- Sidebar strategy and cost configuration
- Editable item grid
- Per-item source, trace and warnings
- Export to CSV
"""
import asyncio
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from item_value.config.settings import FallbackValue, ValueCalculation, get_settings
from item_value.config.log_setup import configure_logging
from item_value.engine import ItemValueEngine
from item_value.errors import ItemValueError
from item_value.store import build_store


st.set_page_config(
    page_title="Item Value Engine",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_store():
    """Get cached document store."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_store(settings)


try:
    base_settings = get_settings()
    store = get_store()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Valuation Configuration
# ============================================================================
with st.sidebar:
    st.header("⚙️ Valuation")

    with st.container(border=True):
        collection_id = st.text_input("Collection", value=base_settings.collection_id)
        value_field = st.text_input("Value Field", value=base_settings.value_field)

        calculations = [c.value for c in ValueCalculation]
        value_calculation = st.selectbox(
            "Value Calculation",
            options=calculations,
            index=calculations.index(base_settings.value_calculation.value),
        )
        return_rate_field = None
        if value_calculation == ValueCalculation.RETURN_RATE.value:
            return_rate_field = st.text_input(
                "Return Rate Field", value=base_settings.return_rate_field or ""
            )

    with st.container(border=True):
        fallbacks = [f.value for f in FallbackValue]
        fallback = st.selectbox(
            "Fallback If Not Found",
            options=fallbacks,
            index=fallbacks.index(base_settings.fallback_value_if_not_found.value),
        )
        fallback_percent = st.number_input(
            "Fallback Percent", value=0.1, min_value=0.0, step=0.01,
            disabled=fallback != FallbackValue.PERCENT.value,
        )

    with st.container(border=True):
        shipping_cost = st.number_input("Shipping Cost", value=0.0, step=1.0)
        fulfillment_cost = st.number_input("Fulfillment Cost", value=0.0, step=1.0)

    st.divider()
    st.caption(f"Store: **{store.name}**")


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Item Value Engine")
st.caption(f"v1.0 | {datetime.now().strftime('%Y-%m-%d')}")

if 'items' not in st.session_state:
    st.session_state['items'] = pd.DataFrame(
        [{"id": "", "price": 0.0, "quantity": 1, "discount": 0.0}]
    )

col1, col2 = st.columns([1.8, 1.2], gap="large")

with col1:
    st.subheader("Event Items")
    edited = st.data_editor(
        st.session_state['items'],
        num_rows="dynamic",
        use_container_width=True,
        key="item_editor",
    )

with col2:
    st.subheader("Event Value")

    with st.container(border=True):
        raw_items = [
            {k: v for k, v in row.items() if pd.notna(v)}
            for row in edited.to_dict(orient="records")
        ]

        try:
            settings = base_settings.with_overrides({
                'collection_id': collection_id,
                'value_field': value_field,
                'value_calculation': value_calculation,
                'return_rate_field': return_rate_field,
                'fallback_value_if_not_found': fallback,
                'fallback_percent': fallback_percent,
                'shipping_cost': shipping_cost,
                'fulfillment_cost': fulfillment_cost,
            })
            engine = ItemValueEngine(store, settings=settings)
            result = asyncio.run(engine.calculate(raw_items))
        except ItemValueError as e:
            st.error(str(e))
            st.stop()

        m1, m2 = st.columns(2)
        m1.metric("Value", result.value)
        m2.metric("Items", len(result.lines))

        for warning in result.warnings:
            st.warning(warning)

        export_df = pd.DataFrame([{
            'ID': line.item_id,
            'Key': line.key,
            'Value': line.value,
            'Source': line.source,
        } for line in result.lines])

        st.dataframe(export_df, use_container_width=True, hide_index=True)

        st.download_button(
            "📥 Export CSV",
            data=export_df.to_csv(index=False).encode('utf-8'),
            file_name=f"item_values_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
            mime="text/csv",
        )

    with st.expander("🔍 Resolution Details"):
        for line in result.lines:
            st.markdown(f"**{line.item_id or '(no id)'}**")
            st.code(line.get_trace_text())
        st.caption(result.get_trace_text())
