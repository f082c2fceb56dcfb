"""
Backend Scripts Module

This module contains utility scripts for database operations and maintenance.

Available scripts:
    - seed_data.py: Creates tables, reference data and the bootstrap admin
    - check_status_table.py: Reports lifecycle statuses missing from Status

Usage:
    python -m scripts.seed_data
    python -m scripts.check_status_table
"""
