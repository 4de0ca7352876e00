"""
Feed Playground UI component
Write raw order and roster documents into the local feed to exercise the dashboard
"""
import streamlit as st
import uuid
import json
import sqlite3
from datetime import datetime, timedelta

from intake_board.feed.sample_data import SAMPLE_TECHNICIANS, SampleData
from intake_board.models.intake import IntakeChannel, OrderPriority, OrderStatus


def render_feed_playground(feed):
    """Render the Feed Playground page"""

    st.markdown("## 🎮 Feed Playground")
    st.markdown("Write raw documents into the local feed. The dashboard updates on the next render.")

    if feed is None:
        st.info(
            "🔌 The feed is not configured. Set INTAKE_FEED_PROJECT_ID and "
            "INTAKE_FEED_DATABASE_PATH (for example in a .env file) and restart the app."
        )
        return

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Order documents", feed.db.count_orders())
    with col2:
        st.metric("User documents", feed.db.count_users())

    tab1, tab2, tab3 = st.tabs([
        "📦 Order Documents",
        "🧑‍🔧 Roster",
        "🧪 Edge Cases"
    ])

    with tab1:
        render_order_documents(feed)

    with tab2:
        render_roster(feed)

    with tab3:
        render_edge_cases(feed)


def write_order(feed, doc_id, data):
    try:
        feed.put_order(doc_id, data)
        st.success(f"✅ Wrote order {doc_id}")
    except sqlite3.Error as e:
        st.error(f"❌ Could not write order {doc_id}: {e}")


def render_order_documents(feed):
    """Form or JSON entry of a single order document"""

    edit_mode = st.radio(
        "Edit Mode",
        ["Form Mode (Quick)", "JSON Mode (Full Control)"],
        key="order_edit_mode",
        horizontal=True
    )

    if edit_mode == "Form Mode (Quick)":
        doc_id = st.text_input("Order ID", value=f"ST-{uuid.uuid4().hex[:5].upper()}")
        customer = st.text_input("Customer name", value="Walk-in customer")

        col1, col2 = st.columns(2)
        with col1:
            brand = st.text_input("Brand", value="Samsung")
        with col2:
            model = st.text_input("Model", value="Galaxy A54")

        col1, col2, col3 = st.columns(3)
        with col1:
            status = st.selectbox("Status", [status.value for status in OrderStatus])
        with col2:
            priority = st.selectbox("Priority", [priority.value for priority in OrderPriority], index=1)
        with col3:
            channel = st.selectbox("Channel", [channel.value for channel in IntakeChannel])

        hours_ago = st.slider("Hours in queue", min_value=0.0, max_value=72.0, value=2.0, step=0.5)
        technician = st.selectbox(
            "Suggested technician", ["(none)"] + [entry["name"] for entry in SAMPLE_TECHNICIANS]
        )
        tags = st.text_input("Tags (comma separated)", value="broken screen")
        accessories = st.text_input("Accessories (comma separated)", value="charger")

        data = {
            "customer_name": customer,
            "device": {
                "brand": brand,
                "model": model,
                "accessories_received": [item.strip() for item in accessories.split(",") if item.strip()],
            },
            "status": status,
            "priority": priority,
            "channel": channel,
            "intake_date": (datetime.now().astimezone() - timedelta(hours=hours_ago)).isoformat(),
            "tags": [tag.strip() for tag in tags.split(",") if tag.strip()],
            "photos": [],
        }
        if technician != "(none)":
            data["assigned_to_name"] = technician

        with st.expander("📄 Document preview"):
            st.json(data)

        if st.button("📤 Write Order", type="primary"):
            write_order(feed, doc_id, data)

    else:
        if "order_json_cache" not in st.session_state:
            sample = SampleData().order_documents(datetime.now().astimezone())[0]
            st.session_state.order_json_cache = json.dumps({"id": sample.id, "data": sample.data}, indent=2)

        raw = st.text_area("Document JSON", value=st.session_state.order_json_cache, height=400)

        if st.button("📤 Write JSON Document", type="primary"):
            try:
                document = json.loads(raw)
            except json.JSONDecodeError as e:
                st.error(f"❌ Invalid JSON: {e}")
                return

            if not isinstance(document, dict) or "id" not in document or not isinstance(document.get("data"), dict):
                st.error('❌ Expected an object like {"id": "...", "data": {...}}')
                return

            st.session_state.order_json_cache = raw
            write_order(feed, str(document["id"]), document["data"])


def render_roster(feed):
    """Manage technician roster entries"""

    st.markdown("### Technician Roster")
    st.markdown("Only users with role `technician` reach the dashboard")

    if st.button("👥 Load Sample Roster"):
        for entry in SAMPLE_TECHNICIANS:
            feed.put_user(entry["id"], {k: v for k, v in entry.items() if k != "id"})
        st.success(f"✅ Wrote {len(SAMPLE_TECHNICIANS)} technicians")

    doc_id = st.text_input("User ID", value=f"usr-{uuid.uuid4().hex[:4]}")
    name = st.text_input("Name", value="New Technician")
    role = st.selectbox("Role", ["technician", "reception", "admin"])
    skills = st.text_input("Skills (comma separated)", value="Android")

    if st.button("➕ Write User"):
        feed.put_user(doc_id, {
            "name": name,
            "role": role,
            "skills": [skill.strip() for skill in skills.split(",") if skill.strip()],
        })
        st.success(f"✅ Wrote user {doc_id}")


def render_edge_cases(feed):
    """Scenarios for the fallback and defaulting paths"""

    scenario = st.selectbox(
        "Select Scenario",
        [
            "Load Sample Orders",
            "Unknown Status",
            "Future Intake Date (Clock Skew)",
            "Unsupported Timestamp Shape",
            "Missing Customer and Device",
            "Empty Feed"
        ]
    )

    now = datetime.now().astimezone()

    if scenario == "Load Sample Orders":
        st.markdown("Writes the sample orders with fresh intake dates.")
        if st.button("▶️ Run"):
            for document in SampleData().order_documents(now):
                feed.put_order(document.id, document.data)
            st.success("✅ Sample orders written")

    elif scenario == "Unknown Status":
        st.markdown('An order with status `"Unknown"` is shown as **Intake** and counted as such.')
        if st.button("▶️ Run"):
            write_order(feed, f"ST-UNK-{uuid.uuid4().hex[:4]}", {
                "customer_name": "Status Test",
                "device": {"brand": "Motorola", "model": "G84"},
                "status": "Unknown",
                "priority": "medium",
                "intake_date": now.isoformat(),
            })

    elif scenario == "Future Intake Date (Clock Skew)":
        st.markdown("An intake date 3 hours in the future shows **0.0h** in queue, never negative.")
        if st.button("▶️ Run"):
            write_order(feed, f"ST-SKEW-{uuid.uuid4().hex[:4]}", {
                "customer_name": "Clock Skew",
                "device": {"brand": "Xiaomi", "model": "Redmi 12"},
                "status": "Intake",
                "priority": "low",
                "intake_date": (now + timedelta(hours=3)).isoformat(),
            })

    elif scenario == "Unsupported Timestamp Shape":
        st.markdown("A numeric intake date is not a supported shape and defaults to now.")
        if st.button("▶️ Run"):
            write_order(feed, f"ST-TS-{uuid.uuid4().hex[:4]}", {
                "customer_name": "Epoch Millis",
                "device": {"brand": "HP", "model": "Pavilion"},
                "status": "Diagnosis",
                "priority": "high",
                "intake_date": 1709544000000,
            })

    elif scenario == "Missing Customer and Device":
        st.markdown("Falls back to the customer id, then placeholders for name and device.")
        if st.button("▶️ Run"):
            write_order(feed, f"ST-MISS-{uuid.uuid4().hex[:4]}", {
                "customer_id": "cli-0042",
                "tags": "not-a-list",
                "intake_date": now.isoformat(),
            })

    elif scenario == "Empty Feed":
        st.markdown("Deletes every document. The dashboard falls back to sample data with a warning.")
        if st.button("🗑️ Clear Feed"):
            feed.clear()
            st.success("✅ Feed cleared")
