"""Adapters implementing the reconciliation ports."""
