"""Bulk text ingestion.

This module turns pasted delimited text into schema-shaped records
and renders stored rows back into the same text format.
"""
