"""
Data Model UI component
Collections, fields and suggested indexes of the backing document store
"""
import streamlit as st
import pandas as pd

from intake_board.models.data_model import COLLECTIONS, CollectionDefinition, indexes_for


def render_data_model():
    """Render the Data Model page"""

    st.markdown("## 🗂️ Data Model")
    st.markdown(
        "Collections, fields and relations behind the intake desk. "
        "Use it as a guide before writing security rules or new flows."
    )

    for collection in COLLECTIONS:
        with st.expander(f"📁 {collection.name}"):
            render_collection(collection)


def render_collection(collection: CollectionDefinition):
    st.markdown(collection.description)

    df = pd.DataFrame([
        {'Field': field, 'Type': type_expr} for field, type_expr in collection.schema_fields.items()
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)

    for subcollection in collection.subcollections:
        st.markdown(f"**Subcollection `{collection.name}/{{id}}/{subcollection.name}`**")
        render_collection(subcollection)

    indexes = indexes_for(collection.name)
    if indexes:
        st.markdown("**Suggested indexes**")
        for index in indexes:
            st.markdown(f"- `{', '.join(index.fields)}`: {index.description}")
