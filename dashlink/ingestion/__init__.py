"""Ingestion layer for calendar feeds."""

from dashlink.ingestion.fetcher import FeedFetcher
from dashlink.ingestion.ics_parser import decode_ics_date, parse_ics, unfold_lines

__all__ = [
    "FeedFetcher",
    "decode_ics_date",
    "parse_ics",
    "unfold_lines",
]
