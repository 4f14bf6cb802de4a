"""Streamlit web UI for sra-harvester."""

import os
import sys
import threading
from datetime import date
from pathlib import Path

# Ensure the src/ directory is on the Python path so that
# sra_harvester is importable on Streamlit Community Cloud
# (which doesn't pip-install the package itself).
_src_dir = str(Path(__file__).resolve().parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

import pandas as pd
import streamlit as st
from streamlit.runtime.scriptrunner import add_script_run_ctx, get_script_run_ctx

from sra_harvester import config as defaults
from sra_harvester.config import HarvestConfig
from sra_harvester.core import Harvester
from sra_harvester.eutils import ListingError
from sra_harvester.extract import iter_rows
from sra_harvester.models import OUTPUT_COLUMNS
from sra_harvester.output import rows_to_bytes


class StreamlitDisplay:
    """Progress display bound to an ``st.progress`` element.

    Updates arrive on the reporter thread, which has to be attached to the
    script run context before it may touch Streamlit elements.
    """

    def __init__(self, placeholder):
        self._placeholder = placeholder
        self._ctx = get_script_run_ctx()
        self._bar = None
        self._total = 0

    def start(self, total: int) -> None:
        self._total = total
        self._bar = self._placeholder.progress(0.0, text=f"Fetching {total} batch(es)...")

    def update(self, completed: int) -> None:
        add_script_run_ctx(threading.current_thread(), self._ctx)
        self._bar.progress(completed / self._total, text=f"Fetched {completed}/{self._total} batches")

    def finish(self) -> None:
        pass


def main():
    st.set_page_config(page_title="SRA Harvester", layout="wide")
    st.title("SRA Run Metadata Harvester")
    st.markdown(
        "Search the **NCBI Sequence Read Archive** and download one row of "
        "metadata per sequencing run as TSV."
    )

    # Sidebar
    with st.sidebar:
        st.header("Settings")
        api_key = st.text_input(
            "NCBI API Key (optional)",
            value=os.environ.get(defaults.API_KEY_ENV, ""),
            type="password",
            help="Increases NCBI rate limit from 3 to 10 requests/sec",
        )
        batch_size = st.number_input(
            "Batch size", min_value=1, max_value=500, value=defaults.DEFAULT_BATCH_SIZE
        )
        max_workers = st.number_input(
            "Concurrent workers", min_value=1, max_value=50, value=defaults.DEFAULT_MAX_WORKERS
        )

    # Input
    term = st.text_input("Search term", value=defaults.DEFAULT_TERM)
    col1, col2 = st.columns(2)
    start = col1.date_input("Published from", value=date(2024, 9, 15))
    end = col2.date_input("Published until", value=date.today())

    # Fetch
    if st.button("Fetch Metadata", type="primary", disabled=not term.strip()):
        config = HarvestConfig(
            term=term.strip(),
            start_date=start.strftime("%Y/%m/%d"),
            end_date=end.strftime("%Y/%m/%d"),
            api_key=api_key.strip() or None,
            batch_size=int(batch_size),
            max_workers=int(max_workers),
        )
        status = st.empty()
        harvester = Harvester(config, display=StreamlitDisplay(st.empty()))

        status.text("Searching...")
        try:
            ids = harvester.search()
        except ListingError as exc:
            st.error(str(exc))
            st.stop()
        status.text(f"Found {len(ids)} IDs")

        result = harvester.fetch(ids)
        st.session_state["rows"] = list(iter_rows(result.package_sets))
        st.session_state["batches"] = (len(result.package_sets), result.total_batches)
        status.text("Done!")

    # Display results
    if "rows" in st.session_state:
        rows = st.session_state["rows"]
        fetched, total = st.session_state["batches"]

        # Metrics
        col1, col2, col3 = st.columns(3)
        col1.metric("Runs", len(rows))
        col2.metric("Batches fetched", fetched)
        col3.metric("Batches dropped", total - fetched)

        # Table
        df = pd.DataFrame([r.to_dict() for r in rows], columns=OUTPUT_COLUMNS)
        st.dataframe(df, use_container_width=True)

        # Download
        st.download_button(
            label="Download TSV",
            data=rows_to_bytes(rows),
            file_name="parsed_metadata.tsv",
            mime="text/tab-separated-values",
        )


if __name__ == "__main__":
    main()
