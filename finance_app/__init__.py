"""
Finance App - Source Package

Personal finance backend: accounts, income/expense transactions
(optionally recurring), receipt pre-fill and transactional email.

DESIGN PRINCIPLES:
1. Outbound calls report their outcome as data, never as a crash
2. Configuration is read once and injected
3. Every save and every dispatch is auditable
4. Storage and email providers are swappable
"""

__version__ = "1.0.0"
__author__ = "Finance App Team"
