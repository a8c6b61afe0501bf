from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from layout_migration.exceptions import MissingDependencyError

DEFAULT_LAYOUT = "layout_onecol"
DEFAULT_REGION = "content"
INLINE_BLOCK_PREFIX = "inline_block:"


class LayoutItem(BaseModel):
    """A paragraph reference waiting to be resolved into a component."""

    model_config = ConfigDict(frozen=True)

    type: str
    source_id: Any
    delta: int = 0
    migration_key: str


class LookupResult(BaseModel):
    """One row returned by the migration lookup service."""

    id: Any
    revision: Optional[Any] = None


def inline_block_configuration(target_type: str, target_revision_id: Any) -> Dict[str, Any]:
    return {
        "id": f"{INLINE_BLOCK_PREFIX}{target_type}",
        "label": "Layout Builder Inline Block",
        "provider": "layout_builder",
        "label_display": "0",
        "view_mode": "full",
        "block_revision_id": target_revision_id,
        "block_serialized": None,
        "context_mapping": {},
    }


class Component(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    region: str = DEFAULT_REGION
    weight: int = 0
    target_revision_id: Optional[Any] = None
    target_type: Optional[str] = None
    display_config: Dict[str, Any] = Field(default_factory=dict, alias="configuration")
    additional: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("weight", mode="before")
    @classmethod
    def _coerce_weight(cls, v: Any) -> int:
        if v is None or v == "":
            return 0
        return int(v)

    @classmethod
    def inline_block(
        cls, uuid: str, target_type: str, target_revision_id: Any, weight: int = 0, region: str = DEFAULT_REGION
    ) -> "Component":
        return cls(
            uuid=uuid,
            region=region,
            weight=weight,
            target_revision_id=target_revision_id,
            target_type=target_type,
            display_config=inline_block_configuration(target_type, target_revision_id),
        )

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> "Component":
        """Rebuild a component from its stored layout builder array."""
        configuration = dict(data.get("configuration") or {})
        plugin_id = configuration.get("id") or ""
        target_type = None
        if plugin_id.startswith(INLINE_BLOCK_PREFIX):
            target_type = plugin_id[len(INLINE_BLOCK_PREFIX):]
        return cls(
            uuid=data["uuid"],
            region=data.get("region") or DEFAULT_REGION,
            weight=data.get("weight", 0),
            target_revision_id=configuration.get("block_revision_id"),
            target_type=target_type,
            display_config=configuration,
            additional=dict(data.get("additional") or {}),
        )

    def to_config(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "region": self.region,
            "configuration": dict(self.display_config),
            "additional": dict(self.additional),
            "weight": self.weight,
        }


class Section(BaseModel):
    """
    An ordered, region-partitioned container of components.

    Components keep insertion order inside their region.  A section with no
    components is still a meaningful value: it renders an empty layout row.
    """

    model_config = ConfigDict(populate_by_name=True)

    layout_template: str = Field(DEFAULT_LAYOUT, alias="layout_id")
    settings: Dict[str, Any] = Field(default_factory=dict, alias="layout_settings")
    components_by_region: Dict[str, List[Component]] = Field(default_factory=dict)
    third_party_settings: Dict[str, Any] = Field(default_factory=dict)

    def append_component(self, component: Component) -> "Section":
        """Append ``component`` to the end of its region.

        The component keeps its creation weight when it already sorts after
        everything in the region; otherwise a copy with the next highest
        weight is stored.  ``component`` itself is never modified.
        """
        region = self.components_by_region.setdefault(component.region, [])
        if region:
            highest = max(c.weight for c in region)
            if component.weight <= highest:
                component = component.model_copy(update={"weight": highest + 1})
        region.append(component)
        return self

    def get_components(self, region: Optional[str] = None) -> List[Component]:
        if region is not None:
            return list(self.components_by_region.get(region, []))
        return [c for comps in self.components_by_region.values() for c in comps]

    def get_component(self, uuid: str) -> Optional[Component]:
        for component in self.get_components():
            if component.uuid == uuid:
                return component
        return None

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> "Section":
        section = cls(
            layout_template=data.get("layout_id") or DEFAULT_LAYOUT,
            settings=dict(data.get("layout_settings") or {}),
            third_party_settings=dict(data.get("third_party_settings") or {}),
        )
        components = data.get("components") or {}
        # Older exports store components as a list instead of a uuid keyed map.
        items = components.values() if isinstance(components, dict) else components
        for component_data in items:
            component = Component.from_config(component_data)
            # Stored weights are kept as-is, not renumbered by append.
            section.components_by_region.setdefault(component.region, []).append(component)
        return section

    def to_config(self) -> Dict[str, Any]:
        return {
            "layout_id": self.layout_template,
            "layout_settings": dict(self.settings),
            "components": {c.uuid: c.to_config() for c in self.get_components()},
            "third_party_settings": dict(self.third_party_settings),
        }


# --- Nested layout values ---


@dataclass(frozen=True)
class Leaf:
    value: Any
    kind: Literal["leaf"] = "leaf"


@dataclass(frozen=True)
class Branch:
    children: List["Node"] = field(default_factory=list)
    kind: Literal["branch"] = "branch"


@dataclass(frozen=True)
class Empty:
    kind: Literal["empty"] = "empty"


Node = Union[Leaf, Branch, Empty]


# --- Component resolution outcomes ---


@dataclass(frozen=True)
class Resolved:
    component: Component
    ok: Literal[True] = True


@dataclass(frozen=True)
class Missing:
    error: MissingDependencyError
    ok: Literal[False] = False


Resolution = Union[Resolved, Missing]
