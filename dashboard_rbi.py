"""
RBI demographic dashboard

A Streamlit dashboard for the Records of Barangay Inhabitants.  Shows the
population structure of a barangay from its resident records.

Visualizations:
1. Population pyramid - Male/female counts per five-year age band
2. Distributions - Pie charts for age dependency, sex, civil status and
   employment status
"""

import logging
import traceback

import pandas as pd
import streamlit as st

from charts import distribution_pie_chart, population_pyramid_chart
from chart_transformers import get_chart_title, transform_chart_data
from constants import (
    CHART_CIVIL_STATUS,
    CHART_COLORS,
    CHART_DEPENDENCY,
    CHART_EMPLOYMENT,
    CHART_SEX,
    CHART_TYPES,
    DEFAULT_CHART_TITLES,
)
from data import (
    barangay_labels,
    civil_status_counts,
    dependency_counts,
    dependency_ratios,
    employment_status_counts,
    filter_barangay,
    load_residents,
    population_pyramid_data,
    population_stats,
    sex_counts,
)
from utils import (
    filter_empty_points,
    format_count,
    format_percentage,
    get_max_point,
    sort_by_value,
    validate_barangay,
    validate_chart_type,
    validate_flag,
)

logger = logging.getLogger(__name__)

# ================================================================================
# PAGE CONFIGURATION
# ================================================================================
st.set_page_config(
    page_title="RBI demographic dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

MALE_COLOR = CHART_COLORS[CHART_SEX]['male']
FEMALE_COLOR = CHART_COLORS[CHART_SEX]['female']
PLOTLY_CONFIG = {'displayModeBar': False, 'scrollZoom': False}

# ================================================================================
# DASHBOARD LAYOUT
# ================================================================================

def render_dashboard(df: pd.DataFrame, params) -> None:
    """Sidebar, metrics and charts for the barangays in *df*."""
    labels = barangay_labels(df)
    if not labels:
        st.warning("No barangay data is available for this access key.")
        return

    # ----------------------------------------------------------------------------
    # Selectors (in sidebar) - synced with URL query parameters
    # ----------------------------------------------------------------------------
    default_barangay = validate_barangay(params.get("brgy"), labels)
    default_chart = validate_chart_type(params.get("chart"))
    default_hide_empty = validate_flag(params.get("hide"))
    default_sorted = validate_flag(params.get("sort"))

    with st.sidebar:
        st.header("Filters", anchor=False)

        selected_barangay = st.selectbox(
            "Barangay",
            options=list(labels.keys()),
            format_func=lambda code: labels[code],
            index=list(labels.keys()).index(default_barangay),
            key="barangay",
        )

        selected_chart = st.selectbox(
            "Highlighted distribution",
            options=list(CHART_TYPES),
            format_func=lambda tag: DEFAULT_CHART_TITLES[tag],
            index=list(CHART_TYPES).index(default_chart),
            key="chart",
        )
        custom_title = st.text_input("Chart title", value="", key="title",
                                     help="Leave empty to use the default title")

        hide_empty = st.toggle("Hide empty categories", value=default_hide_empty, key="hide")
        sort_points = st.toggle("Sort by size", value=default_sorted, key="sort")

    # Update URL with current selections (preserving the key parameter)
    new_params = {"key": params.get("key", "")} if params.get("key") else {}
    new_params["brgy"] = selected_barangay
    new_params["chart"] = selected_chart
    new_params["hide"] = "1" if hide_empty else "0"
    new_params["sort"] = "1" if sort_points else "0"
    if "export" in params:
        new_params["export"] = params.get("export")
    if dict(st.query_params) != new_params:
        st.query_params.update(new_params)

    # ----------------------------------------------------------------------------
    # Statistics for the selected barangay
    # ----------------------------------------------------------------------------
    residents = filter_barangay(df, selected_barangay)
    pyramid = population_pyramid_data(residents)
    stats = population_stats(pyramid)
    dependency = dependency_counts(pyramid)
    ratios = dependency_ratios(dependency)

    distributions = {
        CHART_DEPENDENCY: transform_chart_data(CHART_DEPENDENCY, dependency),
        CHART_SEX: transform_chart_data(CHART_SEX, sex_counts(residents)),
        CHART_CIVIL_STATUS: transform_chart_data(CHART_CIVIL_STATUS, civil_status_counts(residents)),
        CHART_EMPLOYMENT: transform_chart_data(CHART_EMPLOYMENT, employment_status_counts(residents)),
    }
    if hide_empty:
        distributions = {tag: filter_empty_points(points) for tag, points in distributions.items()}
    if sort_points:
        distributions = {tag: sort_by_value(points) for tag, points in distributions.items()}

    logger.debug("Rendering %s with %d residents", selected_barangay, len(residents))

    # ----------------------------------------------------------------------------
    # Headline metrics
    # ----------------------------------------------------------------------------
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Population", format_count(len(residents)))
    col2.metric("Male", format_percentage(stats['male_pct']))
    col3.metric("Female", format_percentage(stats['female_pct']))
    col4.metric("Dependency ratio", f"{ratios['total']:.1f}",
                help="Dependents (0-14 and 65+) per 100 working-age residents")

    # ----------------------------------------------------------------------------
    # Charts
    # ----------------------------------------------------------------------------
    pyramid_col, focus_col = st.columns([3, 2])

    with pyramid_col:
        st.subheader("Population pyramid", anchor=False)
        st.plotly_chart(
            population_pyramid_chart(pyramid, MALE_COLOR, FEMALE_COLOR),
            width='stretch',
            config=PLOTLY_CONFIG,
        )

    with focus_col:
        focus_points = distributions[selected_chart]
        st.plotly_chart(
            distribution_pie_chart(focus_points, get_chart_title(selected_chart, custom_title)),
            width='stretch',
            config=PLOTLY_CONFIG,
        )
        largest = get_max_point(focus_points)
        if largest is not None and largest.value > 0:
            st.markdown(
                f"Largest group: **{largest.label}** with **{format_count(largest.value)}** "
                f"residents ({format_percentage(largest.percentage)})."
            )

        # Export data to CSV - only show if ?export=1 in URL
        if validate_flag(params.get("export")):
            export_df = pd.DataFrame([point.to_dict() for point in focus_points])
            st.download_button(
                label="📥 Export data as CSV",
                data=export_df.to_csv(index=False).encode('utf-8'),
                file_name=f"{selected_chart}_{selected_barangay}.csv",
                mime="text/csv",
            )

    other_tags = [tag for tag in CHART_TYPES if tag != selected_chart]
    for column, tag in zip(st.columns(len(other_tags)), other_tags):
        with column:
            st.plotly_chart(
                distribution_pie_chart(distributions[tag], get_chart_title(tag)),
                width='stretch',
                config=PLOTLY_CONFIG,
            )


# ================================================================================
# MAIN APPLICATION
# ================================================================================

try:
    query_params = st.query_params
    residents_df = load_residents(query_params.get("key"))

    st.title("Records of Barangay Inhabitants", anchor=False)
    render_dashboard(residents_df, query_params)

except FileNotFoundError:
    st.error("Residents data file not found. Check RESIDENTS_URL or the residents_url secret.")
except Exception as e:
    logger.exception("Dashboard failed to render")
    st.error(f"An error occurred: {type(e).__name__}: {str(e)}")
    st.code(traceback.format_exc())
