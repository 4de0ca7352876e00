"""
Intake Dashboard UI components
Overview, order queue, technician load and checklist pages for the intake desk
"""
import streamlit as st
import pandas as pd

from intake_board.engine.aggregation import (
    channel_breakdown, status_breakdown, technician_totals, top_tags
)
from intake_board.engine.filters import ALL, OrderFilter, apply_filters
from intake_board.engine.ranking import next_actions, sort_orders
from intake_board.feed.reconciler import Banner, DashboardView
from intake_board.models.intake import IntakeStatus, OrderPriority

PRIORITY_LABELS = {
    OrderPriority.HIGH: "🔴 High",
    OrderPriority.MEDIUM: "🟠 Medium",
    OrderPriority.LOW: "🟢 Low",
}

CHECKLIST = [
    "Confirm the customer's identity and contact details.",
    "Check the device condition and note dents, scratches and accessories.",
    "Record the passcode/unlock pattern or note that it was not provided.",
    "Take at least 3 photos (front, back, damaged areas).",
    "Label the device and accessories with the generated QR code.",
    "Add observations to the order log (logs subcollection).",
]

RESOURCES = [
    ("Express intake form", "Online form · quick capture at the counter"),
    ("Intake photo manual", "PDF · steps and examples per device category"),
    ("Printable checklist", "A5 sheet · customer signature"),
]

OPERATING_NOTES = [
    "Parts requested during diagnosis must be recorded as an inventory movement.",
    'If the customer rejects the quote, close the order as "Not Repaired" and attach a short report.',
    "Standard warranty: 90 days unless stated otherwise; record the exact date in the warranty field.",
]


def error_banner_text(view: DashboardView) -> str:
    text = f"❌ There was a problem reading the {view.error.feed} feed ({view.error.message}). "
    if view.using_sample:
        return text + "Sample data is shown so you can keep working."
    return text + "The orders shown are the latest received from the feed."


def render_banner(view: DashboardView):
    """Show the single data-source banner for this view, if any"""
    if view.banner == Banner.ERROR:
        st.error(error_banner_text(view))
    elif view.banner == Banner.WARNING:
        st.warning(
            "📭 There is no intake data in the feed yet. "
            "Sample data is shown while the project is being set up."
        )

    if view.anomalies:
        details = ", ".join(f"{field}: {count}" for field, count in sorted(view.anomalies.items()))
        st.caption(f"⚠️ Some documents had unusable fields and were defaulted ({details})")


def render_overview(view: DashboardView):
    """Render the Overview page"""

    st.markdown("## 📊 Intake Overview")
    st.markdown("Today's intake at a glance: arrivals, priorities and what to pick up next")

    summary = view.data.summary
    col1, col2, col3, col4, col5 = st.columns(5)

    with col1:
        st.metric("Intake today", summary.total_today)
    with col2:
        st.metric("Pending diagnosis", summary.pending_diagnosis)
    with col3:
        st.metric("In quote", summary.in_quote)
    with col4:
        st.metric("High priority", summary.high_priority)
    with col5:
        st.metric("SLA risk", summary.sla_risk)

    st.markdown("---")
    col_left, col_mid, col_right = st.columns(3)

    with col_left:
        st.markdown("### Next actions")
        st.caption("Prioritize these diagnoses")
        for position, order in enumerate(next_actions(view.data.orders), start=1):
            st.markdown(
                f"**{position}. {order.order_id}** · {PRIORITY_LABELS[order.priority]}  \n"
                f"{order.device_label} · {order.customer_name}  \n"
                f"_{order.status.value} · {order.channel.value} · "
                f"{order.hours_in_queue:.1f}h in queue_"
            )

    with col_mid:
        st.markdown("### Current distribution")
        st.caption("By status")
        render_counts(status_breakdown(view.data.orders), "Status")
        st.caption("By channel")
        render_counts(channel_breakdown(view.data.orders), "Channel")

    with col_right:
        st.markdown("### Most frequent tags")
        st.caption("Top 6 of the day")
        tags = top_tags(view.data.orders)
        if tags:
            st.markdown(" ".join(f"`{entry.label} · {entry.count}`" for entry in tags))
        else:
            st.info("No tags recorded")


def render_counts(entries, label: str):
    if not entries:
        st.info("Nothing to show")
        return
    df = pd.DataFrame([{label: entry.label, "Orders": entry.count} for entry in entries])
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_order_queue(view: DashboardView):
    """Render the Order Queue page"""

    st.markdown("## 📋 Order Queue")

    col1, col2, col3, col4 = st.columns([2, 1, 1, 1])

    with col1:
        search = st.text_input("Search", placeholder="Order, customer or device")
    with col2:
        status = st.selectbox("Status", [ALL] + [status.value for status in IntakeStatus])
    with col3:
        priority = st.selectbox("Priority", [ALL] + [priority.value for priority in OrderPriority])
    with col4:
        tag = st.selectbox("Tag", [ALL] + view.data.available_tags)

    order_filter = OrderFilter(status=status, priority=priority, tag=tag, search=search)
    ordered = sort_orders(apply_filters(view.data.orders, order_filter))

    st.markdown(f"### Orders at intake ({len(ordered)})")
    st.caption("Sorted by priority and time in queue")

    if not ordered:
        st.info("No orders match the selected filters.")
        return

    rows = []
    for order in ordered:
        rows.append({
            'Order': order.order_id,
            'Received': order.intake_timestamp.strftime("%H:%M"),
            'Customer': order.customer_name,
            'Device': order.device_label,
            'Status': order.status.value,
            'Priority': PRIORITY_LABELS[order.priority],
            'Time': f"{order.hours_in_queue:.1f}h",
            'Channel': order.channel.value,
            'Tags': ", ".join(order.tags),
            'Suggested technician': order.suggested_technician or "Unassigned",
            'Accessories': ", ".join(order.accessories) or "No accessories",
            'Photos': order.photo_count,
        })

    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


def render_technician_load(view: DashboardView):
    """Render the Technician Load page"""

    st.markdown("## 🧑‍🔧 Technician Load")

    totals = technician_totals(view.data.technicians)
    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric("Assigned orders", totals.assigned)
    with col2:
        st.metric("Pending diagnosis", totals.pending_diagnosis)
    with col3:
        st.metric("Active technicians", totals.active)

    st.markdown("### Per technician")
    st.caption("Load and specialties")

    for technician in view.data.technicians:
        with st.container(border=True):
            col_info, col_assigned, col_pending = st.columns([3, 1, 1])
            with col_info:
                st.markdown(f"**{technician.name}**")
                if technician.specialties:
                    st.caption(" • ".join(technician.specialties))
                else:
                    st.caption("No specialties recorded")
            with col_assigned:
                st.metric("Assigned", technician.assigned_count)
            with col_pending:
                st.metric("To diagnose", technician.pending_diagnosis_count)


def render_checklists():
    """Render the Intake Checklist page"""

    st.markdown("## ✅ Intake Checklist")
    st.caption("Apply on every intake")

    for item in CHECKLIST:
        st.checkbox(item, key=f"checklist_{item}")

    st.markdown("### Templates and resources")
    for title, detail in RESOURCES:
        st.markdown(f"- **{title}**: {detail}")

    st.markdown("### Operating notes")
    for note in OPERATING_NOTES:
        st.markdown(f"- {note}")
