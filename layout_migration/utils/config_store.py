from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional


def view_display_config_name(bundle_key: str) -> str:
    return f"core.entity_view_display.node.{bundle_key}.default"


def _layout_sections(config: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Return ``third_party_settings.layout_builder.sections`` if present."""
    value: Any = config
    for key in ("third_party_settings", "layout_builder", "sections"):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value or None


class JsonConfigStore:
    """
    Reads default layouts from exported view display configuration.

    Each bundle's default view display is a JSON file named after its
    configuration object, e.g.
    ``config/sync/core.entity_view_display.node.page.default.json``.
    """

    def __init__(self, config_dir: str) -> None:
        self.config_dir = config_dir

    def get_layout_config(self, bundle_key: str) -> Optional[List[Dict[str, Any]]]:
        path = os.path.join(self.config_dir, f"{view_display_config_name(bundle_key)}.json")
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return _layout_sections(json.load(f))


class DictConfigStore:
    """In-memory store keyed by configuration name, used for tests and dry runs."""

    def __init__(self, configs: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.configs = configs or {}

    def get_layout_config(self, bundle_key: str) -> Optional[List[Dict[str, Any]]]:
        config = self.configs.get(view_display_config_name(bundle_key))
        if not config:
            return None
        return _layout_sections(config)
