"""
Top-level package for the legacy paragraphs → layout sections migration.

This package bundles all components required to turn the paragraph fields
of legacy nodes into layout builder sections whose components embed the
blocks migrated from those paragraphs.  Modules are split into subpackages:

* :mod:`layout_migration.extractors` – source rows and paragraph types
* :mod:`layout_migration.parsers` – section building and layout flattening
* :mod:`layout_migration.migrators` – block resolution, storage readers and
  the layout process steps
* :mod:`layout_migration.utils` – reporting, configuration exports and
  pre-flight checks

Each layer has no direct knowledge of configuration or execution strategy;
orchestration is handled in the migration_tool.
"""
