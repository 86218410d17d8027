"""
Streamlit Frontend for Net Worth Tracker

Thin presentation layer over the mutation client:
- Dashboard: headline figures, trend charts and the monthly table
- Edit Data: cell edits, categories, new month, reset
- Insights: advisory AI insights on the current series

All state lives in the store and the client; this module only renders it.
"""

import asyncio

import streamlit as st

from src.agents import InsightGenerationError
from src.client import InvalidInputError
from src.config import get_settings
from src.metrics import (
    allocation,
    asset_composition,
    format_amount,
    net_worth_trend,
    summarize,
)
from src.models.snapshot import BucketType, ChangeDirection
from src.orchestrator import create_app_components
from src.services.storage import StorageError


st.set_page_config(
    page_title="Net Worth Tracker",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    store, client, insight_flow = create_app_components(use_insights=True)
    run_async(client.refresh())
    return store, client, insight_flow


def main():
    """Main application entry point."""
    _, client, insight_flow = get_components()

    st.sidebar.title("📈 Net Worth Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "✏️ Edit Data", "💡 Insights"],
        index=0,
    )

    if client.last_error:
        st.error(f"Error: {client.last_error}")

    if page == "📊 Dashboard":
        render_dashboard(client, get_settings().app.currency_code)
    elif page == "✏️ Edit Data":
        render_edit_page(client)
    elif page == "💡 Insights":
        render_insights_page(insight_flow)


def _delta(change) -> str | None:
    if change.direction == ChangeDirection.NEUTRAL:
        return None
    return f"{change.percentage_label} from last month"


def render_dashboard(client, currency: str):
    """Render headline figures, trend charts and the monthly table."""
    st.title("📊 Dashboard")

    derived = client.derived
    summary = summarize(derived)
    if summary is None:
        st.info("No months yet. Reset to load the baseline data.")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric(
        "Net Worth",
        format_amount(summary.net_worth.value, currency),
        _delta(summary.net_worth),
    )
    col2.metric(
        "Total Assets",
        format_amount(summary.total_assets.value, currency),
        _delta(summary.total_assets),
    )
    col3.metric(
        "Total Liabilities",
        format_amount(summary.total_liabilities.value, currency),
        _delta(summary.total_liabilities),
        delta_color="inverse",
    )

    st.markdown("### Net Worth Over Time")
    st.bar_chart(
        net_worth_trend(derived),
        x="date",
        y=["Net Worth", "Total Assets", "Total Liabilities"],
        stack=False,
    )

    st.markdown("### Asset Composition")
    st.area_chart(asset_composition(client.series), x="date")

    st.markdown("### Monthly Snapshots")
    st.dataframe(
        [
            {
                "Date": record.date,
                "Total Assets": format_amount(record.total_asset, currency),
                "Total Liabilities": format_amount(record.total_liability, currency),
                "Net Worth": format_amount(record.net, currency),
                "Change": format_amount(record.diff_in_net, currency),
                "Change %": f"{record.percentage_change:.2f}%",
            }
            for record in derived
        ],
        use_container_width=True,
    )

    latest = client.series[-1]
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("#### Asset Allocation")
        st.dataframe(_allocation_rows(latest, BucketType.ASSETS, currency))
    with col2:
        st.markdown("#### Liability Breakdown")
        st.dataframe(_allocation_rows(latest, BucketType.LIABILITIES, currency))


def _allocation_rows(record, bucket, currency):
    return [
        {"Category": s.name, "Value": format_amount(s.value, currency)}
        for s in allocation(record, bucket)
    ]


def render_edit_page(client):
    """Render the data editing controls."""
    st.title("✏️ Edit Data")

    months = [record.date for record in client.series]

    st.markdown("### Update a Value")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        month = st.selectbox("Month", options=months)
    with col2:
        bucket = st.selectbox(
            "Type",
            options=list(BucketType),
            format_func=lambda x: x.value.title(),
        )
    with col3:
        category = st.selectbox("Category", options=client.categories(bucket))
    with col4:
        raw_value = st.text_input("Value", value="")

    if st.button("💾 Save Value", type="primary") and month and category:
        try:
            if run_async(client.edit_cell(month, bucket, category, raw_value)):
                st.rerun()
            else:
                st.warning("That is not a number; nothing was changed.")
        except StorageError as e:
            st.error(f"Failed to save changes: {e}")

    st.markdown("---")
    st.markdown("### Categories")
    col1, col2 = st.columns(2)
    with col1:
        new_bucket = st.selectbox(
            "Add to",
            options=list(BucketType),
            format_func=lambda x: x.value.title(),
            key="add_bucket",
        )
        new_name = st.text_input("New category name")
        if st.button("➕ Add Category"):
            try:
                run_async(client.add_category(new_bucket, new_name))
                st.rerun()
            except InvalidInputError as e:
                st.warning(str(e))
            except StorageError as e:
                st.error(f"Failed to add category: {e}")
    with col2:
        old_bucket = st.selectbox(
            "Remove from",
            options=list(BucketType),
            format_func=lambda x: x.value.title(),
            key="remove_bucket",
        )
        old_name = st.selectbox("Category to remove", options=client.categories(old_bucket))
        confirm = st.checkbox("Remove it from all months")
        if st.button("🗑️ Remove Category", disabled=not confirm) and old_name:
            try:
                run_async(client.remove_category(old_bucket, old_name))
                st.rerun()
            except StorageError as e:
                st.error(f"Failed to remove category: {e}")

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("📅 Add Month"):
            try:
                run_async(client.append_month())
                st.rerun()
            except StorageError as e:
                st.error(f"Failed to add new month: {e}")
    with col2:
        confirm_reset = st.checkbox("Restore the original data (cannot be undone)")
        if st.button("♻️ Reset Data", disabled=not confirm_reset):
            try:
                run_async(client.reset_series())
                st.rerun()
            except StorageError as e:
                st.error(f"Failed to reset data: {e}")


def render_insights_page(insight_flow):
    """Render AI insights."""
    st.title("💡 Insights")

    if not insight_flow.available:
        st.info("Set GEMINI_API_KEY in your .env file to enable insights.")
        return

    if st.button("✨ Generate Insights", type="primary"):
        with st.spinner("Analyzing your finances..."):
            try:
                insights = run_async(insight_flow.generate())
            except InsightGenerationError as e:
                st.error(f"Failed to generate insights: {e}")
                return

        for insight in insights:
            st.markdown(f"#### {insight.title}")
            st.markdown(insight.explanation)
            st.success(insight.suggestion)


if __name__ == "__main__":
    main()
