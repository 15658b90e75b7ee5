"""Record transforms.

This module derives content fingerprints and snapshot digests.
"""
