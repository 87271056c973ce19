import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go
import streamlit as st

from covid_query.config import config
from covid_query.csv_parser import DATE_FORMAT, to_csv_text
from covid_query.queries import CovidQueries
from covid_query.records import AGGREGATE_FIELDS, RANKED_FIELDS, TREND_FIELDS
from covid_query.store import MissingColumnsError, RecordStore
from covid_query.utils import setup_logger

DEFAULT_COUNTRIES = ['United States', 'India', 'Brazil', 'United Kingdom', 'Canada']
MAX_DISPLAY_ROWS = 100

logger = setup_logger("covid_query", log_file=config.log_path, level=config.LOG_LEVEL)

st.set_page_config(
    page_title="COVID-19 Death & Vaccination Queries",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2rem;
        font-weight: 600;
        text-align: center;
        margin-bottom: 1rem;
    }

    .section-header {
        font-size: 1.5rem;
        font-weight: 600;
        margin-top: 1.5rem;
        margin-bottom: 1rem;
    }
</style>
""", unsafe_allow_html=True)

PRETTY = {
    "country": "Country",
    "date": "Date",
    "total_cases": "Total Cases (Cumulative)",
    "total_deaths": "Total Deaths (Cumulative)",
    "death_percentage": "Death Percentage (%)",
    "total_vaccinations": "Total Vaccine Doses",
    "people_vaccinated": "People Vaccinated (1+ dose)",
    "people_fully_vaccinated": "People Fully Vaccinated",
    "full_vaccination_rate": "Fully Vaccinated (% of Population)",
    "reproduction_rate": "Reproduction Rate (R)",
    "avg_death_percentage": "Avg Death Percentage (%)",
    "avg_full_vaccination_rate": "Avg Fully Vaccinated (%)",
    "rank": "Rank in Country",
}


@st.cache_resource
def _load_store(cases_path: Path, vaccinations_path: Path, delimiter: str = ','):
    try:
        with st.spinner(f"Loading {cases_path.name} and {vaccinations_path.name}..."):
            return RecordStore.from_csv(cases_path, vaccinations_path, separator=delimiter)
    except FileNotFoundError as e:
        st.error(f"File not found: {e}")
    except MissingColumnsError as e:
        st.error(f"{e}\n\nFix: export the tables with the expected headers.")
    return None


def _to_st_format(rows: List[Any], columns) -> Dict[str, List[Any]]:
    out = {PRETTY.get(c, c): [] for c in columns}
    for row in rows[:MAX_DISPLAY_ROWS]:
        for c in columns:
            value = getattr(row, c)
            if hasattr(value, "strftime"):
                value = value.strftime(DATE_FORMAT)
            out[PRETTY.get(c, c)].append(value)
    return out


def _fmt2(x: Optional[float]) -> str:
    return f"{x:.2f}" if x is not None else "N/A"


st.markdown('<h1 class="main-header">COVID-19 Death & Vaccination Queries</h1>', unsafe_allow_html=True)

with st.sidebar:
    st.header("Data Settings")

    cases_file = st.text_input("Cases CSV", value=config.CASES_FILE)
    vaccinations_file = st.text_input("Vaccinations CSV", value=config.VACCINATIONS_FILE)

    sep_mode = st.selectbox("Separator Style", ["Comma (,)", "Tab (\\t)", "Semicolon (;)", "Custom"])

    if sep_mode == "Comma (,)":
        sep_input = ","
    elif sep_mode == "Tab (\\t)":
        sep_input = "\t"
    elif sep_mode == "Semicolon (;)":
        sep_input = ";"
    else:
        sep_input = st.text_input("Enter Custom Separator", value="|", max_chars=1)

    st.markdown("---")
    st.header("Query Parameters")
    min_cases = st.number_input("Minimum Total Cases", min_value=0, value=config.MIN_CASES, step=100)
    top_limit = st.number_input("Top N Countries", min_value=1, value=max(config.TOP_LIMIT, 1), step=1)
    min_vax_rate = st.slider("Minimum Avg Full Vaccination (%)", 0.0, 100.0,
                             float(config.MIN_AVG_VACCINATION_RATE), 1.0)

store = _load_store(config.DATA_DIR / cases_file, config.DATA_DIR / vaccinations_file, sep_input)
if store is None:
    st.stop()

queries = CovidQueries(store, config)
all_countries = store.countries()

with st.sidebar:
    st.markdown("---")
    st.header("Country Selection")
    selected_countries = st.multiselect(
        "Select Countries",
        options=all_countries,
        default=[c for c in DEFAULT_COUNTRIES if c in all_countries],
        key="selected_countries"
    )
    span = store.date_range()
    if span:
        st.caption(f"Case data from {span[0]:%Y-%m-%d} to {span[1]:%Y-%m-%d}")

if store.rejected:
    with st.expander(f"{len(store.rejected)} rejected input rows"):
        st.dataframe({
            "Table": [r.table for r in store.rejected[:MAX_DISPLAY_ROWS]],
            "Row": [r.index for r in store.rejected[:MAX_DISPLAY_ROWS]],
            "Reason": [r.reason for r in store.rejected[:MAX_DISPLAY_ROWS]],
        }, width='stretch')

start_time = time.time()
combined = queries.combined_frame
elapsed_ms = (time.time() - start_time) * 1000

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Case Records", f"{len(store.cases):,}")
with col2:
    st.metric("Vaccination Records", f"{len(store.vaccinations):,}")
with col3:
    st.metric("Combined Records", f"{len(combined):,}")
with col4:
    st.metric("Join Time", f"{elapsed_ms:.0f} ms")

tab_trend, tab_top, tab_agg, tab_corr = st.tabs([
    "Death % Trend",
    "Top Countries",
    "Death vs Vaccination",
    "Correlation",
])

with tab_trend:
    st.markdown('<h2 class="section-header">Death Percentage Trend</h2>', unsafe_allow_html=True)
    if not selected_countries:
        st.warning("Please select at least one country.")
    else:
        trend_rows = queries.trend(selected_countries)
        if trend_rows:
            fig = go.Figure()
            for country in selected_countries:
                points = [r for r in trend_rows if r.country == country and r.death_percentage is not None]
                if points:
                    fig.add_trace(go.Scatter(
                        x=[r.date for r in points],
                        y=[r.death_percentage for r in points],
                        mode='lines',
                        name=country,
                        line=dict(width=2)
                    ))
            fig.update_layout(
                title="Deaths as % of Cases",
                xaxis_title="Date",
                yaxis_title="Death Percentage (%)",
                hovermode='x unified',
                height=400,
                showlegend=True
            )
            st.plotly_chart(fig, use_container_width=True)
            st.dataframe(_to_st_format(trend_rows, TREND_FIELDS), width='stretch')
            st.download_button("Download trend CSV", to_csv_text(trend_rows, TREND_FIELDS),
                               file_name="death_percentage_trend.csv", mime="text/csv")
        else:
            st.info("No combined records for the selected countries.")

with tab_top:
    st.markdown('<h2 class="section-header">Highest Death Percentage per Country</h2>', unsafe_allow_html=True)
    st.markdown(f"Rows with more than **{int(min_cases):,}** cases and no more deaths than cases; "
                f"one peak row per country, top **{int(top_limit)}**.")
    top_rows = queries.top_death_percentage(int(min_cases), int(top_limit))
    if top_rows:
        st.dataframe(_to_st_format(top_rows, RANKED_FIELDS), width='stretch', hide_index=True)
        st.download_button("Download top countries CSV", to_csv_text(top_rows, RANKED_FIELDS),
                           file_name="top_death_percentage.csv", mime="text/csv")
    else:
        st.info("No country has a qualifying record.")

with tab_agg:
    st.markdown('<h2 class="section-header">Average Death % vs Average Full Vaccination</h2>',
                unsafe_allow_html=True)
    agg_rows = queries.aggregate(min_vax_rate)
    if agg_rows:
        st.dataframe(_to_st_format(agg_rows, AGGREGATE_FIELDS), width='stretch', hide_index=True)
        st.download_button("Download averages CSV", to_csv_text(agg_rows, AGGREGATE_FIELDS),
                           file_name="death_vs_vaccination.csv", mime="text/csv")
    else:
        st.info(f"No country averages more than {min_vax_rate:.0f}% full vaccination.")

with tab_corr:
    st.markdown('<h2 class="section-header">Correlation</h2>', unsafe_allow_html=True)
    result = queries.correlate(int(min_cases))
    c1, c2 = st.columns(2)
    with c1:
        st.metric("Pearson r (death % vs full vaccination %)", _fmt2(result.value))
    with c2:
        st.metric("Pairs Used", f"{result.pairs:,}")
    if not result.is_defined:
        st.warning(f"Correlation is undefined: {result.reason.replace('_', ' ')}.")

    subset = combined.filter([c is not None and c > min_cases for c in combined['total_cases']])
    xs, ys, labels = [], [], []
    for x, y, country in zip(subset['full_vaccination_rate'], subset['death_percentage'], subset['country']):
        if x is not None and y is not None:
            xs.append(x)
            ys.append(y)
            labels.append(country)
    if xs:
        fig = go.Figure(go.Scattergl(x=xs, y=ys, mode='markers', text=labels, marker=dict(size=4, opacity=0.5)))
        fig.update_layout(
            xaxis_title=PRETTY["full_vaccination_rate"],
            yaxis_title=PRETTY["death_percentage"],
            height=450
        )
        st.plotly_chart(fig, use_container_width=True)
