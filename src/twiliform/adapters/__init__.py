"""Adapters binding the reconciliation ports to concrete remote APIs."""
