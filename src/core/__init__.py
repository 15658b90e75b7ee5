"""Shared configuration, errors, types and schema registry."""
