# argusrts

The entity-component core of a real-time strategy game. It comes with a
command that generates the game's component registry sources from component
definition files.

## Modules

### `argusrts.registry`

`ComponentRegistry(max_entities=4096)` holds at most one component of each
registered type for each entity id.

- `register(component_type, dynamically_allocated=False)` makes a type known
  to the registry. Registering the same type twice raises `ValueError`.
- `get_component(entity_id, component_type)` returns the component, or
  `None` if the entity has none.
- `add_component(entity_id, component_type)` creates a component with
  `component_type()`. If the entity already has one, a warning is logged and
  the existing component is returned.
- `get_or_add_component(entity_id, component_type)` does the same without
  the warning.
- `remove_components_for_entity(entity_id)` removes every component of one
  entity. `flush_all_components()` removes every component of every entity.
- `component_debug_string(entity_id)` joins the components' own
  `debug_string()` results, or their `repr` when they have no such method.

An id outside `0..max_entities-1` raises `InvalidEntityIdError`, which is a
subclass of `IndexError`. Using a type that was never registered raises
`TypeError`.

### `argusrts.entity`

`EntityManager(registry=None, singleton_entity_id=None)` hands out entity
ids. It also tracks the lowest and highest ids in use, through
`lowest_taken_entity_id` and `highest_taken_entity_id`. The singleton id is
never counted in that range.

- `create_entity(lowest_id=0)` takes the first free id at or above
  `lowest_id`.
- `next_lowest_untaken_id(lowest_id)` finds that id. It raises
  `OverflowError` when every id is taken.
- `destroy_entity(entity)` accepts an `Entity` or an id and removes the
  entity's components. Destroying an entity that does not exist raises
  `ValueError`.
- `retrieve_entity(entity_id)` returns the entity, or the falsy
  `empty_entity` if the id is not taken.
- `does_entity_exist(entity_id)` reports whether an id is taken.
  `flush_all_entities()` releases every id and every component.

An `Entity` is truthy only while its id is taken. Two entities are equal
when their ids are equal. `get_component`, `add_component` and
`get_or_add_component` pass straight through to the registry.
`debug_string()` returns `"(id: N)"` followed by the entity's component
debug strings.

### `argusrts.timer`

A `TimerComponent` holds a list of `Timer` slots. A timer's state is one of
`TimerState.NOT_SET`, `TICKING` or `COMPLETED`. A `TimerHandle` refers to
one slot, by its `timer_index`.

- `start_timer(entity, seconds)` reuses the first free slot, or appends a new
  one, up to 255 slots. It raises `RuntimeError` if the handle is already
  assigned.
- `is_timer_complete(entity)` reports whether the referenced timer is
  `COMPLETED`.
- `finish_timer_handling(entity)` releases the timer only if it is
  completed.
- `cancel_timer(entity)` releases the timer whatever its state.

These methods raise `ValueError` for an entity that does not exist. They
raise `LookupError` when the entity has no `TimerComponent`, or when the
handle's slot cannot be found.

### `argusrts.kdtree`

`KDTree` indexes entities by the `location` of their `TransformComponent`.
Its levels split on x, y and z in turn.

- `insert_entity(entity)` adds one entity.
- `rebuild_for_all_entities(manager)` rebuilds the tree from every live
  entity that has a transform. The root is a placeholder node at the average
  location of the previous contents.
- `flush_all_nodes()` empties the tree and returns the average location of
  the entities it held, or `None` if it held none.
  `reset_with_average_location()` empties the tree and leaves that
  placeholder root.
- `contains_entity(entity)` reports whether the entity is in the tree.
- `find_closest_to_location(location, entity_to_ignore=None)` and
  `find_other_closest(entity)` return an entity id, or `None` if there is
  no candidate.
- `find_within_range_of_location(location, search_range,
  entity_to_ignore=None)` and `find_others_within_range(entity,
  search_range)` return the ids of entities strictly closer than the range.
  A range of zero or less raises `ValueError`.

### `argusrts.models` and `argusrts.parsing`

`ProjectLayout(project_directory)` locates the generator's inputs inside a
project directory:

- `component_definitions_directory()` is
  `Source/Argus/ECS/ComponentDefinitions`.
- `dynamic_alloc_component_definitions_directory()` is
  `Source/Argus/ECS/DynamicAllocComponentDefinitions`.
- `static_data_record_definitions_directory()` is
  `Source/Argus/StaticData/RecordDefinitions`.
- `template_directory(subdirectory)` is under
  `Plugins/ArgusCodeGenerator/Source/ArgusCodeGenerator/Private/Templates`.

`parse_component_data(layout)` returns a `ParseComponentDataOutput`. It
holds the struct names, include statements and member variables
(`ParsedVariableData`) read line by line from the definition files.
`parse_static_data_records(layout)` returns a
`ParseStaticDataRecordsOutput` in the same way.
`combine_static_and_dynamic_component_data(parsed)` joins the static and
dynamically allocated lists, with static components first.

`parse_component_specific_template(path, component_names)` repeats a
template once per name, putting the name in place of `#####`.
`write_out_file(path, lines)` writes lines to a file.

### `argusrts.registry_generator`

- `render_registry_header`, `render_registry_cpp` and
  `render_component_size_tests` each take `(parsed, template_directory)`.
  They expand the templates and return the resulting lines.
- `generate_component_registry_code(parsed, layout)` writes three files and
  returns their paths:
  - `Source/Argus/ECS/ArgusComponentRegistry.h`
  - `Source/Argus/ECS/ArgusComponentRegistry.cpp`
  - `Source/Argus/ECS/Tests/ArgusComponentSizeTests.cpp`

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Generating the component registry

```
argusrts-generate-registry [PROJECT_DIRECTORY]
```

The project directory defaults to the current directory. The command reads
the component definitions and fills the `ComponentRegistry` templates. It
writes the three files listed above and prints their paths. On a file or
parsing error it prints the error and exits with status 1.

## What it does not do

- There are no systems and no game loop. Nothing ticks timers down or marks
  them completed. Nothing moves entities or keeps the k-d tree up to date on
  its own; the caller has to call `rebuild_for_all_entities`.
- Static-data records can be parsed, but no code is generated from them.
- No data-asset component files are generated. The only output is the
  component registry header, its source file and the size tests.