"""
Streamlit UI for the refinish shop.

Features:
- Estimate builder with live breakdown and trace
- Order board with status filter and admin updates
- Active price table view and export
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from refinish_tool.api.state import build_state
from refinish_tool.config.settings import get_settings
from refinish_tool.engine import OrderSpecification, ServiceType, PaintStyle, PaintCondition, GripService
from refinish_tool.engine.formatting import (
    dollars_to_cents, format_price, format_price_range, format_service_type, format_grip_service, format_status,
)
from refinish_tool.services.order_validation import ORDER_STATUSES, MAX_CLUBS, MAX_GRIPS


st.set_page_config(
    page_title="Refinish Shop",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_services():
    """Get cached service instances."""
    return build_state(get_settings())


try:
    services = get_services()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

engine = services.engine
store = services.store


# ============================================================================
# SIDEBAR: Shop status
# ============================================================================
with st.sidebar:
    st.header("⛳ Shop Status")

    stats = store.get_stats()
    st.metric("Orders", stats['total'])
    for status, count in sorted(stats['by_status'].items()):
        st.caption(f"**{format_status(status)}**: {count}")

    st.divider()

    if services.settings.emails_enabled:
        st.success("📧 Emails enabled")
    else:
        st.warning("⚠️ Emails disabled (no RESEND_API_KEY)")

    if services.settings.price_table_csv:
        st.info(f"Price table: {services.settings.price_table_csv.name}")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Club Refinishing")
st.caption(f"v1.0 | Pricing Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["⚡ Estimate", "📦 Orders", "💲 Price Table"])


# ============================================================================
# TAB 1: ESTIMATE
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.4, 1.6], gap="large")

    with col1:
        st.subheader("Order Details")

        with st.container(border=True):
            service_type = st.selectbox(
                "Service", options=list(ServiceType), format_func=lambda s: format_service_type(s)
            )
            paints = service_type != ServiceType.GRIPS_ONLY

            club_count = st.number_input(
                "Clubs", min_value=0, max_value=MAX_CLUBS, value=8 if paints else 0, step=1, disabled=not paints
            )
            paint_style = st.selectbox(
                "Paint Style", options=list(PaintStyle),
                format_func=lambda s: s.value.replace('_', ' ').title(), disabled=not paints
            )
            condition = st.selectbox(
                "Current Paint", options=list(PaintCondition),
                format_func=lambda s: s.value.replace('_', ' ').title(), disabled=not paints
            )

        with st.container(border=True):
            grip_service = st.selectbox(
                "Grip Service", options=list(GripService), format_func=lambda s: format_grip_service(s)
            )
            grip_count = st.number_input(
                "Grips", min_value=0, max_value=MAX_GRIPS, value=0, step=1,
                disabled=grip_service == GripService.NONE
            )

    with col2:
        st.subheader("Estimate")

        spec = OrderSpecification(
            service_type=service_type,
            club_count=int(club_count) if paints else 0,
            paint_style=paint_style,
            current_paint_condition=condition,
            grip_service=grip_service,
            grip_count=int(grip_count) if grip_service != GripService.NONE else 0,
        )
        result = engine.calculate(spec)

        with st.container(border=True):
            m1, m2 = st.columns(2)
            m1.metric("Estimate", format_price_range(result.est_price_min, result.est_price_max))
            m2.metric("Shipping", format_price(result.breakdown.shipping_estimate))

            st.divider()

            breakdown_df = pd.DataFrame([
                {"Component": name.replace('_', ' ').title(), "Amount": f"${cents / 100:,.2f}"}
                for name, cents in result.breakdown.to_dict().items()
            ])
            st.dataframe(breakdown_df, use_container_width=True, hide_index=True)

        with st.expander("🔍 Resolution Details"):
            for t in result.trace:
                if t.value:
                    st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                else:
                    st.caption(f"**{t.step}**: {t.description}")


# ============================================================================
# TAB 2: ORDERS
# ============================================================================
with tab2:
    st.subheader("📦 Orders")

    col1, col2 = st.columns([1, 3])
    with col1:
        status_filter = st.selectbox("Status", ["all", *ORDER_STATUSES], format_func=lambda s: "All" if s == "all" else format_status(s))

    orders, total = store.list_orders(status=status_filter, limit=200)
    st.caption(f"Showing {len(orders)} of {total} orders")

    if orders:
        orders_df = pd.DataFrame([{
            "Order": o.short_id,
            "Created": o.created_at[:16].replace('T', ' '),
            "Customer": o.full_name,
            "Service": format_service_type(o.service_type),
            "Estimate": format_price_range(o.est_price_min, o.est_price_max),
            "Quoted": format_price(o.quoted_price) if o.quoted_price is not None else "",
            "Status": format_status(o.status),
        } for o in orders])
        st.dataframe(orders_df, use_container_width=True, hide_index=True)

        st.divider()
        st.markdown("##### ✏️ Update Order")

        by_short_id = {o.short_id: o for o in orders}
        selected = st.selectbox("Order", options=list(by_short_id))
        order = by_short_id[selected]

        with st.form("update_order"):
            new_status = st.selectbox(
                "Status", options=list(ORDER_STATUSES),
                index=list(ORDER_STATUSES).index(order.status) if order.status in ORDER_STATUSES else 0,
                format_func=format_status,
            )
            quoted = st.number_input(
                "Quoted Price ($)", min_value=0.0, step=1.0,
                value=order.quoted_price / 100 if order.quoted_price is not None else None,
                placeholder="No quote yet",
            )
            notes = st.text_area("Admin Notes", value=order.admin_notes or "")

            if st.form_submit_button("💾 Save", type="primary"):
                store.update_order_admin(
                    order.id,
                    status=new_status,
                    quoted_price=dollars_to_cents(quoted),
                    admin_notes=notes or None,
                )
                st.success(f"Updated {order.short_id}")
                st.rerun()

        uploads = store.get_order_uploads(order.id)
        if uploads:
            st.markdown("##### 📷 Photos")
            cols = st.columns(4)
            for i, upload in enumerate(uploads):
                found = services.uploads.open(upload.r2_key)
                if found:
                    cols[i % 4].image(found[0], caption=upload.original_filename)
    else:
        st.info("No orders yet")


# ============================================================================
# TAB 3: PRICE TABLE
# ============================================================================
with tab3:
    st.subheader("💲 Active Price Table")

    prices_df = pd.DataFrame([
        {"key": key, "cents": cents, "Price": f"${cents / 100:,.2f}"}
        for key, cents in engine.prices.to_dict().items()
    ])
    st.dataframe(prices_df, use_container_width=True, hide_index=True)

    st.download_button(
        "📥 CSV",
        data=prices_df[["key", "cents"]].to_csv(index=False),
        file_name="prices.csv",
        mime="text/csv",
    )
    st.caption("Save as data/prices.csv to override the defaults.")
