"""Shared helpers for decimals, dates, logging and output sanitizing."""
