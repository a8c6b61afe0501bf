"""
Extractors for legacy data.

This subpackage reads source rows from CSV or JSON Lines exports of legacy
nodes, and resolves the type of a legacy paragraph from its id with a
run-scoped cache.
"""
