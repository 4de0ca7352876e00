"""
Intake Board
Streamlit dashboard for a repair shop's intake desk
"""
import streamlit as st

from intake_board.config import configure_logging, load_settings
from intake_board.feed.local_feed import create_local_feed
from intake_board.feed.reconciler import FeedReconciler, FeedState

# Page configuration
st.set_page_config(
    page_title="Intake Board",
    page_icon="🛠️",
    layout="wide",
    initial_sidebar_state="expanded"
)


def start_session():
    """Build the feed and reconciler for this browser session"""
    settings = load_settings()
    configure_logging(settings.log_level)
    feed = create_local_feed(settings)
    reconciler = FeedReconciler(feed, configured=settings.is_configured)
    reconciler.start()
    st.session_state.settings = settings
    st.session_state.feed = feed
    st.session_state.reconciler = reconciler


def restart_session():
    st.session_state.reconciler.close()
    if st.session_state.feed is not None:
        st.session_state.feed.db.close()
    start_session()


if 'reconciler' not in st.session_state:
    start_session()

# Main header
st.markdown("# 🛠️ Intake Board")
st.caption("Service desk · intake, diagnosis and quotes")

# Sidebar navigation
st.sidebar.title("Navigation")
page = st.sidebar.radio(
    "Select Page",
    [
        "📊 Overview",
        "📋 Order Queue",
        "🧑‍🔧 Technician Load",
        "✅ Intake Checklist",
        "🗂️ Data Model",
        "🎮 Feed Playground",
        "⚙️ Settings"
    ]
)

reconciler = st.session_state.reconciler
state_labels = {
    FeedState.LIVE: "🟢 Live",
    FeedState.DEGRADED: "🟠 Degraded",
    FeedState.UNCONFIGURED: "⚪ Sample data",
}
st.sidebar.markdown(f"**Feed:** {state_labels[reconciler.state]}")

if page in ("📊 Overview", "📋 Order Queue", "🧑‍🔧 Technician Load"):
    from intake_board.ui.intake_dashboard import (
        render_banner, render_order_queue, render_overview, render_technician_load
    )

    # Pick up writes from other sessions and processes
    if st.session_state.feed is not None:
        st.session_state.feed.refresh()

    view = reconciler.view()
    if view.loading:
        st.info("⏳ Loading feed data…")
        st.stop()

    render_banner(view)

    if page == "📊 Overview":
        render_overview(view)
    elif page == "📋 Order Queue":
        render_order_queue(view)
    else:
        render_technician_load(view)

elif page == "✅ Intake Checklist":
    from intake_board.ui.intake_dashboard import render_checklists
    render_checklists()

elif page == "🗂️ Data Model":
    from intake_board.ui.data_model_overview import render_data_model
    render_data_model()

elif page == "🎮 Feed Playground":
    from intake_board.ui.feed_playground import render_feed_playground
    render_feed_playground(st.session_state.feed)

elif page == "⚙️ Settings":
    st.markdown("## Settings")

    settings = st.session_state.settings
    st.markdown("### Feed")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("State", reconciler.state.value)
    with col2:
        st.metric("Subscriptions attempted", reconciler.subscription_attempts)
    with col3:
        st.metric("Banner", reconciler.banner.value)

    if settings.is_configured:
        st.info(f"Project `{settings.project_id}` · database `{settings.database_path}`")
    else:
        st.warning(f"Missing settings: {', '.join(settings.missing)}")

    if reconciler.error is not None:
        st.error(f"Last error on {reconciler.error.feed} feed: {reconciler.error.message}")

    if st.button("🔄 Reconnect Feed"):
        restart_session()
        st.success("Feed reconnected")
        st.rerun()

    st.markdown("### About")
    st.markdown("""
    **Intake Board**
    Version: 1.0.0
    Purpose: Intake queue, technician load and data model reference for the service desk

    Built with:
    - Streamlit (UI)
    - SQLite (Local feed store)
    - Pydantic (Models)
    - pandas (Tables)
    """)
