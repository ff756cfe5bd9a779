"""Per-entity component storage for the ECS."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTITIES = 4096

T = TypeVar("T")


class InvalidEntityIdError(IndexError):
    """Raised when an entity id lies outside the registry's range."""

    def __init__(self, entity_id: int, max_entities: int, action: str = "") -> None:
        self.entity_id = entity_id
        self.max_entities = max_entities
        suffix = f", used when {action}" if action else ""
        super().__init__(
            f"Invalid entity id {entity_id}{suffix} (valid ids are 0..{max_entities - 1})."
        )


@dataclass
class _ComponentStore:
    component_type: type
    dynamically_allocated: bool
    instances: Dict[int, Any]


class ComponentRegistry:
    """Holds at most one component of each registered type per entity id.

    Statically allocated component types keep a slot for every possible
    entity; dynamically allocated ones only exist for the entities that
    carry them. Both behave the same from the outside.
    """

    def __init__(self, max_entities: int = DEFAULT_MAX_ENTITIES) -> None:
        if max_entities <= 0:
            raise ValueError("max_entities must be positive")
        self.max_entities = max_entities
        self._stores: Dict[type, _ComponentStore] = {}

    @property
    def component_types(self) -> List[type]:
        """Registered component types, in registration order."""
        return list(self._stores)

    @property
    def num_component_types(self) -> int:
        return len(self._stores)

    def register(self, component_type: type, dynamically_allocated: bool = False) -> None:
        """Make a component type known to the registry."""
        if component_type in self._stores:
            raise ValueError(f"{component_type.__name__} is already registered.")
        self._stores[component_type] = _ComponentStore(
            component_type, bool(dynamically_allocated), {}
        )

    def is_dynamically_allocated(self, component_type: type) -> bool:
        return self._store(component_type).dynamically_allocated

    def _store(self, component_type: type) -> _ComponentStore:
        try:
            return self._stores[component_type]
        except KeyError:
            raise TypeError(
                f"{getattr(component_type, '__name__', component_type)} is not a registered component type."
            ) from None

    def _check_id(self, entity_id: int, action: str) -> None:
        if not 0 <= entity_id < self.max_entities:
            raise InvalidEntityIdError(entity_id, self.max_entities, action)

    def get_component(self, entity_id: int, component_type: Type[T]) -> Optional[T]:
        """Return the entity's component of this type, or None if it has none."""
        store = self._store(component_type)
        self._check_id(entity_id, f"getting {component_type.__name__}")
        return store.instances.get(entity_id)

    def add_component(self, entity_id: int, component_type: Type[T]) -> T:
        """Attach a fresh component; an existing one is kept and returned."""
        store = self._store(component_type)
        self._check_id(entity_id, f"adding {component_type.__name__}")
        existing = store.instances.get(entity_id)
        if existing is not None:
            logger.warning(
                "Attempting to add a %s to entity %d, which already has one.",
                component_type.__name__,
                entity_id,
            )
            return existing
        component = component_type()
        store.instances[entity_id] = component
        return component

    def get_or_add_component(self, entity_id: int, component_type: Type[T]) -> T:
        """Return the entity's component, creating it silently if missing."""
        store = self._store(component_type)
        self._check_id(entity_id, f"adding {component_type.__name__}")
        component = store.instances.get(entity_id)
        if component is None:
            component = component_type()
            store.instances[entity_id] = component
        return component

    def remove_components_for_entity(self, entity_id: int) -> None:
        """Drop every component attached to the entity."""
        self._check_id(entity_id, "removing components")
        for store in self._stores.values():
            store.instances.pop(entity_id, None)

    def flush_all_components(self) -> None:
        """Drop every component of every entity."""
        for store in self._stores.values():
            store.instances.clear()

    def component_debug_string(self, entity_id: int) -> str:
        """Concatenate the debug strings of all components on the entity."""
        self._check_id(entity_id, "building debug string")
        parts = []
        for store in self._stores.values():
            component = store.instances.get(entity_id)
            if component is None:
                continue
            describe = getattr(component, "debug_string", None)
            parts.append(describe() if callable(describe) else repr(component))
        return "".join(parts)