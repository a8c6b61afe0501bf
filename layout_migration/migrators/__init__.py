"""
Block resolution and layout process steps.

This subpackage resolves paragraph references into components embedding
the migrated blocks, reads the duckdb migration database, and provides the
process steps that build and flatten the layout field of a row.
"""
