"""Parsec availability dashboard: data sync, session state and exports."""
