"""Harvest SRA experiment metadata from NCBI E-utilities into a flat TSV."""

__version__ = "0.1.0"
