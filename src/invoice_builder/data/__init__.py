"""
Static data for the invoice builder.

Modules:
- us_states: US state codes, display names and base sales tax rates
"""
