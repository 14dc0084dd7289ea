"""
solver-gauge-core Result Viewer

Minimal Streamlit dashboard for viewing benchmark results.
Displays the distance trend across iterations, the consistency verdict and
the per-vehicle breakdown of any archived iteration.

Usage:
    pip install -e ".[viewer]"
    streamlit run src/solver_gauge_core/viewer.py
    streamlit run src/solver_gauge_core/viewer.py -- --results-dir results

Requires the package to be installed (e.g. via ``pip install -e .``).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from solver_gauge_core.consistency_calc import (
    classify_consistency,
    compute_statistics,
    format_driving_time,
)
from solver_gauge_core.domain.value_objects import ConsistencyTier

# -- Colors --
SERIES_COLOR = "#1a73e8"
BEST_COLOR = "#34a853"
MEAN_COLOR = "#5f6368"
TREND_COLORS = {
    "best": "#34a853",
    "improved": "#1a73e8",
    "regressed": "#ea4335",
    "steady": "#9aa0a6",
}


def _find_result_pairs(results_dir: Path) -> list[dict]:
    """Find matching iterations / summary CSV pairs in results_dir."""
    pairs = []
    for iterations_path in sorted(results_dir.glob("iterations_*.csv"), reverse=True):
        run_id = iterations_path.stem.replace("iterations_", "")
        summary_path = results_dir / f"summary_{run_id}.csv"
        pairs.append({
            "run_id": run_id,
            "iterations_path": iterations_path,
            "summary_path": summary_path if summary_path.exists() else None,
        })
    return pairs


def _load_data(pair: dict) -> tuple[pd.DataFrame, pd.DataFrame | None]:
    """Load iterations and summary DataFrames from a result pair."""
    iterations_df = pd.read_csv(pair["iterations_path"])
    summary_df = pd.read_csv(pair["summary_path"]) if pair["summary_path"] else None
    return iterations_df, summary_df


def _render_trend(iterations_df: pd.DataFrame) -> None:
    """Render the distance series with best and mean reference lines."""
    st.header("Distance per Iteration")

    distances = iterations_df["distance_km"].tolist()
    stats = compute_statistics(distances)
    trends = iterations_df["trend"].fillna("steady") if "trend" in iterations_df.columns else None

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=iterations_df["iteration"],
        y=distances,
        mode="lines+markers",
        name="Distance",
        line=dict(color=SERIES_COLOR, width=2),
        marker=dict(
            color=[TREND_COLORS.get(t, SERIES_COLOR) for t in trends] if trends is not None else SERIES_COLOR,
            size=10,
        ),
    ))

    fig.add_hline(
        y=stats.best,
        line_dash="dash",
        line_color=BEST_COLOR,
        line_width=1,
        annotation_text=f"best {stats.best:.1f}km",
        annotation_position="bottom left",
        annotation_font=dict(size=11, color=BEST_COLOR),
    )
    fig.add_hline(
        y=stats.mean,
        line_dash="dot",
        line_color=MEAN_COLOR,
        line_width=1,
        annotation_text=f"mean {stats.mean:.1f}km",
        annotation_position="top left",
        annotation_font=dict(size=11, color=MEAN_COLOR),
    )

    fig.update_layout(
        xaxis_title="Iteration",
        yaxis_title="Distance (km)",
        xaxis_tickvals=iterations_df["iteration"].tolist(),
        template="plotly_white",
        height=420,
        showlegend=False,
    )

    st.plotly_chart(fig, use_container_width=True)


def _render_consistency(iterations_df: pd.DataFrame) -> None:
    """Render best / mean / worst and the consistency verdict."""
    st.header("Consistency")

    stats = compute_statistics(iterations_df["distance_km"].tolist())
    assessment = classify_consistency(stats.std_dev_percent)

    cols = st.columns(4)
    cols[0].metric("Best", f"{stats.best:.1f}km")
    cols[1].metric("Average", f"{stats.mean:.1f}km")
    cols[2].metric("Worst", f"{stats.worst:.1f}km")
    cols[3].metric("Variance", f"{stats.std_dev_percent:.1f}%")

    if assessment.tier is ConsistencyTier.HIGH_VARIANCE:
        st.error(f"**{assessment.title}**: {assessment.message}")
    elif assessment.tier is ConsistencyTier.MODERATE_VARIANCE:
        st.warning(f"**{assessment.title}**: {assessment.message}")
    else:
        st.success(f"**{assessment.title}**: {assessment.message}")


def _render_iterations_table(iterations_df: pd.DataFrame) -> None:
    """Render one row per iteration."""
    st.header("Iterations")

    display_cols = [
        "iteration", "distance_km", "total_driving_time_seconds", "score",
        "vs_previous_pct", "vs_best_pct", "trend", "elapsed_seconds",
        "resolution", "enrichment_available",
    ]
    existing = [c for c in display_cols if c in iterations_df.columns]

    styled = iterations_df[existing].copy()
    if "total_driving_time_seconds" in styled.columns:
        styled["total_driving_time_seconds"] = styled["total_driving_time_seconds"].apply(format_driving_time)
    styled = styled.rename(columns={
        "iteration": "Iteration",
        "distance_km": "Distance (km)",
        "total_driving_time_seconds": "Driving",
        "score": "Score",
        "vs_previous_pct": "vs prev (%)",
        "vs_best_pct": "vs best (%)",
        "trend": "Trend",
        "elapsed_seconds": "Elapsed (s)",
        "resolution": "Resolution",
        "enrichment_available": "Road routes",
    })

    st.dataframe(styled, use_container_width=True, hide_index=True)


def _render_vehicle_breakdown(iterations_df: pd.DataFrame) -> None:
    """Render the per-vehicle breakdown of a selected iteration."""
    if "vehicle_details" not in iterations_df.columns:
        return

    st.header("Vehicle Breakdown")
    selected = st.selectbox("Iteration", iterations_df["iteration"].tolist(), index=0)
    row = iterations_df[iterations_df["iteration"] == selected].iloc[0]

    details = json.loads(row["vehicle_details"]) if isinstance(row["vehicle_details"], str) else []
    if not details:
        st.info("No vehicle details recorded for this iteration.")
        return

    vehicles_df = pd.DataFrame(details)
    fig = go.Figure(go.Bar(
        x=vehicles_df["vehicle_id"],
        y=vehicles_df["driving_time_seconds"] / 60,
        marker_color=SERIES_COLOR,
        text=vehicles_df["visit_count"].apply(lambda n: f"{n} visits"),
        textposition="outside",
    ))
    fig.update_layout(
        xaxis_title="Vehicle",
        yaxis_title="Driving time (min)",
        template="plotly_white",
        height=380,
    )
    st.plotly_chart(fig, use_container_width=True)

    vehicles_df["driving"] = vehicles_df["driving_time_seconds"].apply(format_driving_time)
    st.dataframe(
        vehicles_df[["vehicle_id", "driving", "total_demand", "capacity", "visit_count"]].rename(columns={
            "vehicle_id": "Vehicle",
            "driving": "Driving",
            "total_demand": "Demand",
            "capacity": "Capacity",
            "visit_count": "Visits",
        }),
        use_container_width=True,
        hide_index=True,
    )


def main() -> None:
    # Parse --results-dir from Streamlit args (after --)
    parser = argparse.ArgumentParser()
    parser.add_argument("--results-dir", default="results")
    args, _ = parser.parse_known_args()

    results_dir = Path(args.results_dir)

    st.set_page_config(page_title="solver-gauge-core", layout="wide")
    st.title("solver-gauge-core Results")

    if not results_dir.exists():
        st.error(f"Results directory not found: `{results_dir}`")
        st.info("Run a benchmark first:\n```\npython -m solver_gauge_core.runner --iterations 5\n```")
        return

    pairs = _find_result_pairs(results_dir)
    if not pairs:
        st.warning(f"No result files found in `{results_dir}/`")
        st.info("Run a benchmark first:\n```\npython -m solver_gauge_core.runner --iterations 5\n```")
        return

    # Run selector
    run_ids = [p["run_id"] for p in pairs]
    selected_run_id = st.sidebar.selectbox("Run", run_ids, index=0)
    selected_pair = next(p for p in pairs if p["run_id"] == selected_run_id)

    iterations_df, summary_df = _load_data(selected_pair)

    if iterations_df.empty:
        st.warning("This run archived no iterations.")
        if summary_df is not None:
            st.dataframe(summary_df, use_container_width=True, hide_index=True)
        return

    # Sidebar info
    st.sidebar.markdown("---")
    if summary_df is not None:
        summary = summary_df.iloc[0]
        st.sidebar.markdown(f"**Demo data**: {summary['demo_data_id']}")
        st.sidebar.markdown(f"**Status**: {summary['status']}")
        st.sidebar.markdown(
            f"**Iterations**: {int(summary['completed_iterations'])}/{int(summary['iteration_count'])}"
        )
        if pd.notna(summary.get("total_seconds")):
            st.sidebar.markdown(f"**Total time**: {summary['total_seconds']:.0f}s")
        if isinstance(summary.get("failure"), str):
            st.sidebar.error(summary["failure"])
    else:
        st.sidebar.markdown(f"**Iterations**: {len(iterations_df)}")

    # Render sections
    _render_trend(iterations_df)
    _render_consistency(iterations_df)
    _render_iterations_table(iterations_df)
    _render_vehicle_breakdown(iterations_df)


if __name__ == "__main__":
    main()
