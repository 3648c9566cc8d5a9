"""Airtable budget reconciliation API."""
