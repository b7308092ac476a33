"""
Test suite for the pooled fund engine

Contains:
- tests/unit/          : Unit tests for ledger, proration, collaborators and coordinator
"""
