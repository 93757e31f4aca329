"""Export ingestion: line tokenizer and per-platform row adapters."""

from .adapters.freelancer_csv import parse_export, parse_row
from .tokenizer import split_row

__all__ = ["parse_export", "parse_row", "split_row"]
