"""Reads component and static-data record definitions for the code generator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

from .models import (
    ARGUS_API_DELIMITER,
    COMPONENT_DEFINITION_DIRECTORY_NAME,
    DYNAMIC_ALLOC_COMPONENT_DEFINITION_DIRECTORY_NAME,
    PROPERTY_DELIMITER,
    PROPERTY_IGNORE_DELIMITER,
    PROPERTY_STATIC_DATA_DELIMITER,
    STATIC_DATA_RECORD_DEFINITIONS_DIRECTORY_NAME,
    STRUCT_DELIMITER,
    UE_PROPERTY_DELIMITER,
    VAR_DELIMITER,
    ParseComponentDataOutput,
    ParsedVariableData,
    ParseStaticDataRecordsOutput,
    ProjectLayout,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_PROPERTY_MARKERS = (
    PROPERTY_DELIMITER,
    PROPERTY_IGNORE_DELIMITER,
    PROPERTY_STATIC_DATA_DELIMITER,
    UE_PROPERTY_DELIMITER,
)


def _read_lines(path: PathLike) -> List[str]:
    """Read a text file as lines without their terminators."""
    with open(path, encoding="utf-8") as stream:
        lines = stream.read().split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _substr(text: str, start: int, stop: int) -> str:
    """Slice ``text`` from ``start`` to ``stop``, running to the end when ``stop`` precedes ``start``."""
    return text[start:] if stop < start else text[start:stop]


def _strip_spaces(text: str) -> str:
    return text.replace(" ", "")


def _declared_name(line: str, delimiter: str) -> str:
    post_start = line.find(delimiter) + len(delimiter)
    colon = line.find(":")
    if colon != -1:
        name = _substr(line, post_start, colon)
    else:
        brace = line.find("{")
        name = _substr(line, post_start, brace) if brace != -1 else line[post_start:]
    return _strip_spaces(name)


def _current_block(variable_data: List[List[ParsedVariableData]]) -> List[ParsedVariableData]:
    if not variable_data:
        raise ValueError("Found a variable or property declaration before any type declaration.")
    return variable_data[-1]


def _include_for(path: PathLike, directory_name: str) -> str:
    text = str(path)
    index = text.find(directory_name)
    if index == -1:
        raise ValueError(f"Path {text} does not lie inside a {directory_name} directory.")
    return text[index:]


def _files_in(directory: Path) -> Iterable[Path]:
    return sorted(entry for entry in directory.iterdir() if entry.is_file())


def parse_component_data(layout: ProjectLayout) -> ParseComponentDataOutput:
    """Parse every static and dynamically allocated component definition of the project."""
    output = ParseComponentDataOutput()
    for path in _files_in(layout.component_definitions_directory()):
        parse_component_data_from_file(path, output, False)
    for path in _files_in(layout.dynamic_alloc_component_definitions_directory()):
        parse_component_data_from_file(path, output, True)
    return output


def parse_component_data_from_file(
    path: PathLike, output: ParseComponentDataOutput, is_dynamically_allocated: bool
) -> None:
    """Add the components declared in one definition file to ``output``."""
    directory_name = (
        DYNAMIC_ALLOC_COMPONENT_DEFINITION_DIRECTORY_NAME
        if is_dynamically_allocated
        else COMPONENT_DEFINITION_DIRECTORY_NAME
    )
    component_path = _include_for(path, directory_name)
    include_statement = f'#include "{component_path}"'
    data_asset_include_statement = f'#include "..\\{component_path}"'

    if is_dynamically_allocated:
        output.dynamic_alloc_component_registry_include_statements.append(include_statement)
        variable_data = output.dynamic_alloc_component_variable_data
    else:
        output.component_registry_include_statements.append(include_statement)
        variable_data = output.component_variable_data

    lines = _read_lines(path)
    logger.info("Reading from file: %s", path)

    did_parse_property_declaration = False
    for line in lines:
        if "//" in line:
            continue
        if parse_struct_declaration(line, data_asset_include_statement, output, is_dynamically_allocated):
            continue
        if parse_variable_declaration(line, did_parse_property_declaration, variable_data):
            did_parse_property_declaration = False
            continue
        if parse_property_macro(line, variable_data):
            did_parse_property_declaration = True


def parse_component_specific_template(path: PathLike, component_names: Iterable[str]) -> List[str]:
    """Repeat a template once per component, replacing ``#####`` with its name."""
    raw_lines = _read_lines(path)
    return [line.replace("#####", name) for name in component_names for line in raw_lines]


def parse_static_data_records(layout: ProjectLayout) -> ParseStaticDataRecordsOutput:
    """Parse every static-data record definition of the project."""
    output = ParseStaticDataRecordsOutput()
    for path in _files_in(layout.static_data_record_definitions_directory()):
        parse_static_data_records_from_file(path, output)
    return output


def parse_static_data_records_from_file(path: PathLike, output: ParseStaticDataRecordsOutput) -> None:
    """Add the records declared in one definition file to ``output``."""
    record_path = _include_for(path, STATIC_DATA_RECORD_DEFINITIONS_DIRECTORY_NAME)
    output.static_data_include_statements.append(f'#include "{record_path}"')

    lines = _read_lines(path)
    logger.info("Reading from file: %s", path)

    variable_data = output.static_data_record_variable_data
    did_parse_property_declaration = False
    for line in lines:
        if parse_record_class_declaration(line, output):
            continue
        if parse_variable_declaration(line, did_parse_property_declaration, variable_data):
            did_parse_property_declaration = False
            continue
        if parse_property_macro(line, variable_data):
            did_parse_property_declaration = True


def write_out_file(path: PathLike, lines: Iterable[str]) -> None:
    """Replace the file's contents with the given lines."""
    with open(path, "w", encoding="utf-8") as stream:
        for line in lines:
            stream.write(line)
            stream.write("\n")


def parse_struct_declaration(
    line: str,
    data_asset_include: str,
    output: ParseComponentDataOutput,
    is_dynamically_allocated: bool,
) -> bool:
    """Record a component struct declared on this line; False if there is none."""
    if STRUCT_DELIMITER not in line:
        return False
    name = _declared_name(line, STRUCT_DELIMITER)
    if is_dynamically_allocated:
        output.dynamic_alloc_component_names.append(name)
        output.dynamic_alloc_component_data_asset_include_statements.append(data_asset_include)
        output.dynamic_alloc_component_variable_data.append([])
    else:
        output.component_names.append(name)
        output.component_data_asset_include_statements.append(data_asset_include)
        output.component_variable_data.append([])
    return True


def parse_property_macro(line: str, variable_data: List[List[ParsedVariableData]]) -> bool:
    """Start a new variable entry for a property macro line; False if the line has none."""
    if not any(marker in line for marker in _PROPERTY_MARKERS):
        return False
    _current_block(variable_data).append(ParsedVariableData(property_macro=line))
    return True


def parse_variable_declaration(
    line: str, with_property: bool, variable_data: List[List[ParsedVariableData]]
) -> bool:
    """Record a member variable declared on this line.

    When the preceding line was a property macro, the declaration completes
    that macro's entry. Returns False when the line declares no variable or
    repeats one already recorded.
    """
    var_index = line.find(VAR_DELIMITER)
    if var_index == -1:
        return False

    type_name = line[:var_index]
    equal_index = line.find("=")
    end_index = line.find(";")
    if equal_index != -1:
        var_name = _substr(line, var_index, equal_index)
        default_value = _substr(line, equal_index + 1, end_index) if end_index != -1 else ""
    elif end_index != -1:
        var_name = _substr(line, var_index, end_index)
        default_value = ""
    else:
        return False

    type_name = _strip_spaces(type_name)
    var_name = _strip_spaces(var_name)
    default_value = _strip_spaces(default_value)

    block = _current_block(variable_data)
    if with_property and block:
        last = block[-1]
        last.type_name = type_name
        last.var_name = var_name
        last.default_value = default_value
        return True

    if any(existing.var_name in var_name for existing in block):
        return False
    block.append(ParsedVariableData(type_name=type_name, var_name=var_name, default_value=default_value))
    return True


def parse_record_class_declaration(line: str, output: ParseStaticDataRecordsOutput) -> bool:
    """Record a static-data record class declared on this line; False if there is none."""
    if ARGUS_API_DELIMITER not in line:
        return False
    output.static_data_record_names.append(_declared_name(line, ARGUS_API_DELIMITER))
    output.static_data_record_variable_data.append([])
    return True