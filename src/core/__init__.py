"""
Core domain models, integer arithmetic and invariants of the fund.

This module contains the foundational building blocks that are independent
of external systems (custody, conversion routers, etc.).
"""
