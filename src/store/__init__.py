"""Row store layer.

This module persists lookup table rows behind a small repository
interface so reconciliation never touches a store handle ambiently.
"""
