"""A three-dimensional k-d tree over entity locations for spatial queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .entity import Entity, EntityManager

logger = logging.getLogger(__name__)

Vector = Tuple[float, float, float]

ZERO_VECTOR: Vector = (0.0, 0.0, 0.0)


@dataclass
class TransformComponent:
    """World-space placement of an entity."""

    location: Vector = ZERO_VECTOR

    def debug_string(self) -> str:
        x, y, z = self.location
        return f"\n[TransformComponent] location: ({x}, {y}, {z})"


@dataclass(eq=False)
class _Node:
    location: Vector
    entity_id: Optional[int] = None
    left: Optional["_Node"] = field(default=None, repr=False)
    right: Optional["_Node"] = field(default=None, repr=False)

    def iter_subtree(self) -> Iterator["_Node"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)


def _as_vector(location: Sequence[float]) -> Vector:
    x, y, z = location
    return (float(x), float(y), float(z))


def _dist_squared(a: Vector, b: Vector) -> float:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2


def _entity_location(entity: "Entity") -> Vector:
    if not entity:
        raise ValueError(
            f"Passed in entity {entity.id} is invalid. It cannot be added to or retrieved from the k-d tree."
        )
    transform = entity.get_component(TransformComponent)
    if transform is None:
        raise LookupError(
            f"Entity {entity.id} has no TransformComponent. "
            "It cannot be added to or retrieved from the k-d tree."
        )
    return _as_vector(transform.location)


class KDTree:
    """Spatial index of entities keyed on the location of their transforms.

    Levels of the tree split on x, y and z in turn. The root may be a
    placeholder node that carries a location but no entity; such nodes are
    never reported by queries.
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None

    def __len__(self) -> int:
        """Number of entities in the tree."""
        if self._root is None:
            return 0
        return sum(1 for node in self._root.iter_subtree() if node.entity_id is not None)

    def flush_all_nodes(self) -> Optional[Vector]:
        """Empty the tree and return the average location of the entities it held.

        Returns None when the tree held no entities.
        """
        total = [0.0, 0.0, 0.0]
        count = 0
        if self._root is not None:
            for node in self._root.iter_subtree():
                if node.entity_id is None:
                    continue
                count += 1
                for axis in range(3):
                    total[axis] += node.location[axis]
        self._root = None
        if count == 0:
            return None
        return (total[0] / count, total[1] / count, total[2] / count)

    def insert_entity(self, entity: "Entity") -> None:
        """Add the entity at the location of its transform."""
        node = _Node(_entity_location(entity), entity.id)
        if self._root is None:
            self._root = node
            return

        current = self._root
        depth = 0
        while True:
            dimension = depth % 3
            if node.location[dimension] < current.location[dimension]:
                if current.left is None:
                    current.left = node
                    return
                current = current.left
            else:
                if current.right is None:
                    current.right = node
                    return
                current = current.right
            depth += 1

    def reset_with_average_location(self) -> None:
        """Empty the tree, leaving a placeholder root at the entities' average location."""
        average = self.flush_all_nodes()
        self._root = _Node(average if average is not None else ZERO_VECTOR)

    def rebuild_for_all_entities(self, manager: "EntityManager") -> None:
        """Rebuild from every live entity of the manager that has a transform."""
        self.reset_with_average_location()
        for entity_id in range(manager.lowest_taken_entity_id, manager.highest_taken_entity_id + 1):
            entity = manager.retrieve_entity(entity_id)
            if not entity:
                continue
            if entity.get_component(TransformComponent) is None:
                continue
            self.insert_entity(entity)

    def contains_entity(self, entity: "Entity") -> bool:
        """Whether the entity has a node in the tree."""
        if not entity:
            raise ValueError(
                f"Passed in entity {entity.id} is invalid. It cannot be retrieved from the k-d tree."
            )
        if self._root is None:
            return False
        return any(node.entity_id == entity.id for node in self._root.iter_subtree())

    def find_closest_to_location(
        self, location: Sequence[float], entity_to_ignore: Optional["Entity"] = None
    ) -> Optional[int]:
        """Id of the entity nearest to the location, or None if there is none."""
        if self._root is None:
            return None
        ignore_id = entity_to_ignore.id if entity_to_ignore is not None else None
        found = self._closest(self._root, _as_vector(location), ignore_id, 0)
        return found.entity_id if found is not None else None

    def find_other_closest(self, entity: "Entity") -> Optional[int]:
        """Id of the entity nearest to the given one, excluding itself."""
        return self.find_closest_to_location(_entity_location(entity), entity)

    def find_within_range_of_location(
        self,
        location: Sequence[float],
        search_range: float,
        entity_to_ignore: Optional["Entity"] = None,
    ) -> List[int]:
        """Ids of entities strictly closer than ``search_range`` to the location."""
        if self._root is None:
            return []
        if search_range <= 0.0:
            raise ValueError("Searching range is less than or equal to 0.")
        ignore_id = entity_to_ignore.id if entity_to_ignore is not None else None
        found: List[int] = []
        self._within_range(found, self._root, _as_vector(location), search_range**2, ignore_id, 0)
        return found

    def find_others_within_range(self, entity: "Entity", search_range: float) -> List[int]:
        """Ids of other entities strictly closer than ``search_range`` to the given one."""
        return self.find_within_range_of_location(_entity_location(entity), search_range, entity)

    @staticmethod
    def _is_candidate(node: Optional[_Node], ignore_id: Optional[int]) -> bool:
        return node is not None and node.entity_id is not None and node.entity_id != ignore_id

    def _choose_closer(
        self,
        node0: Optional[_Node],
        node1: Optional[_Node],
        target: Vector,
        ignore_id: Optional[int],
    ) -> Optional[_Node]:
        if not self._is_candidate(node0, ignore_id):
            return node1
        if not self._is_candidate(node1, ignore_id):
            return node0
        if _dist_squared(node0.location, target) > _dist_squared(node1.location, target):
            return node1
        return node0

    def _closest(
        self, node: Optional[_Node], target: Vector, ignore_id: Optional[int], depth: int
    ) -> Optional[_Node]:
        if node is None:
            return None

        dimension = depth % 3
        node_value = node.location[dimension]
        target_value = target[dimension]
        if target_value < node_value:
            first, second = node.left, node.right
        else:
            first, second = node.right, node.left

        best = self._closest(first, target, ignore_id, depth + 1)
        best = self._choose_closer(node, best, target, ignore_id)

        if best is not None:
            if _dist_squared(best.location, target) > (node_value - target_value) ** 2:
                cached = best
                best = self._closest(second, target, ignore_id, depth + 1)
                best = self._choose_closer(
                    self._choose_closer(cached, best, target, ignore_id), best, target, ignore_id
                )
        else:
            best = self._closest(second, target, ignore_id, depth + 1)
            best = self._choose_closer(node, best, target, ignore_id)

        return best

    def _within_range(
        self,
        found: List[int],
        node: Optional[_Node],
        target: Vector,
        range_squared: float,
        ignore_id: Optional[int],
        depth: int,
    ) -> None:
        if node is None:
            return

        if _dist_squared(node.location, target) < range_squared:
            if self._is_candidate(node, ignore_id):
                found.append(node.entity_id)
            self._within_range(found, node.right, target, range_squared, ignore_id, depth + 1)
            self._within_range(found, node.left, target, range_squared, ignore_id, depth + 1)
            return

        dimension = depth % 3
        difference = target[dimension] - node.location[dimension]
        if difference**2 > range_squared:
            branch = node.right if difference > 0.0 else node.left
            self._within_range(found, branch, target, range_squared, ignore_id, depth + 1)
        else:
            self._within_range(found, node.right, target, range_squared, ignore_id, depth + 1)
            self._within_range(found, node.left, target, range_squared, ignore_id, depth + 1)