"""Entities and the manager that hands out and reclaims their ids."""

from __future__ import annotations

from typing import Optional, Set, Type, TypeVar, Union

from .registry import ComponentRegistry, InvalidEntityIdError

T = TypeVar("T")


class Entity:
    """A lightweight handle on an entity id owned by an :class:`EntityManager`.

    An entity is truthy only while its id is taken in its manager. Two
    entities compare equal when their ids match.
    """

    __slots__ = ("_manager", "_id")

    def __init__(self, manager: "EntityManager", entity_id: int) -> None:
        self._manager = manager
        self._id = entity_id

    @property
    def id(self) -> int:
        return self._id

    @property
    def manager(self) -> "EntityManager":
        return self._manager

    def __bool__(self) -> bool:
        return self._manager.does_entity_exist(self._id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Entity(id={self._id})"

    def get_component(self, component_type: Type[T]) -> Optional[T]:
        """Return this entity's component of the given type, or None."""
        return self._manager.registry.get_component(self._id, component_type)

    def add_component(self, component_type: Type[T]) -> T:
        """Attach a component of the given type to this entity."""
        return self._manager.registry.add_component(self._id, component_type)

    def get_or_add_component(self, component_type: Type[T]) -> T:
        """Return this entity's component, creating it if it is missing."""
        return self._manager.registry.get_or_add_component(self._id, component_type)

    def debug_string(self) -> str:
        """Describe the entity id followed by its components."""
        text = f"(id: {self._id})"
        registry = self._manager.registry
        if 0 <= self._id < registry.max_entities:
            text += registry.component_debug_string(self._id)
        return text


class EntityManager:
    """Allocates entity ids and tracks the lowest and highest ids in use.

    The singleton entity id, when given, is excluded from the lowest and
    highest bookkeeping so that it never widens the range of ordinary ids.
    """

    def __init__(
        self,
        registry: Optional[ComponentRegistry] = None,
        singleton_entity_id: Optional[int] = None,
    ) -> None:
        self.registry = registry if registry is not None else ComponentRegistry()
        self.max_entities = self.registry.max_entities
        if singleton_entity_id is not None and not 0 <= singleton_entity_id < self.max_entities:
            raise InvalidEntityIdError(singleton_entity_id, self.max_entities, "setting singleton id")
        self.singleton_entity_id = singleton_entity_id
        self._taken: Set[int] = set()
        self._lowest = self.max_entities
        self._highest = 0

    @property
    def empty_entity(self) -> Entity:
        """The entity that stands for "no entity"; always falsy."""
        return Entity(self, self.max_entities)

    @property
    def lowest_taken_entity_id(self) -> int:
        return self._lowest

    @property
    def highest_taken_entity_id(self) -> int:
        return self._highest

    def flush_all_entities(self) -> None:
        """Release every entity id and drop every component."""
        self.registry.flush_all_components()
        self._taken.clear()
        self._lowest = self.max_entities
        self._highest = 0

    def does_entity_exist(self, entity_id: int) -> bool:
        return 0 <= entity_id < self.max_entities and entity_id in self._taken

    def create_entity(self, lowest_id: int = 0) -> Entity:
        """Take the lowest free id at or above ``lowest_id``."""
        entity_id = self.next_lowest_untaken_id(lowest_id)
        self._taken.add(entity_id)
        if entity_id != self.singleton_entity_id:
            self._lowest = min(self._lowest, entity_id)
            self._highest = max(self._highest, entity_id)
        return Entity(self, entity_id)

    def destroy_entity(self, entity: Union[Entity, int]) -> None:
        """Release an entity (or entity id) and remove its components."""
        entity_id = entity.id if isinstance(entity, Entity) else entity
        if not self.does_entity_exist(entity_id):
            raise ValueError(f"Attempting to destroy entity {entity_id}, which doesn't exist.")

        self._taken.discard(entity_id)
        self.registry.remove_components_for_entity(entity_id)

        if entity_id == self.singleton_entity_id:
            return

        if entity_id == self._lowest:
            self._lowest = next(
                (i for i in range(self._lowest + 1, self._highest + 1) if i in self._taken),
                self.max_entities,
            )

        if entity_id == self._highest:
            self._highest = next(
                (i for i in range(self._highest - 1, self._lowest - 1, -1) if i in self._taken),
                0,
            )

    def retrieve_entity(self, entity_id: int) -> Entity:
        """Return the entity with this id, or the empty entity if it is not taken."""
        if self.does_entity_exist(entity_id):
            return Entity(self, entity_id)
        return self.empty_entity

    def next_lowest_untaken_id(self, lowest_id: int) -> int:
        """Return the first free id at or above ``lowest_id``."""
        if not 0 <= lowest_id < self.max_entities:
            raise InvalidEntityIdError(lowest_id, self.max_entities, "looking for a free id")
        for candidate in range(lowest_id, self.max_entities):
            if candidate not in self._taken:
                return candidate
        raise OverflowError("Exceeded the maximum number of allowed entities.")