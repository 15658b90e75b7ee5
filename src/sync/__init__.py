"""Reconciliation layer.

This module diffs submitted bulk text against stored rows and applies
the resulting insert and delete patch atomically.
"""
