"""Renders the component registry sources and size tests from templates."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .models import ParseComponentDataOutput, ProjectLayout
from .parsing import parse_component_data, parse_component_specific_template, write_out_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COMPONENT_REGISTRY_DIRECTORY_SUFFIX = "Source/Argus/ECS"
ECS_TESTS_DIRECTORY_SUFFIX = "Tests"
COMPONENT_REGISTRY_TEMPLATE_SUBDIRECTORY = "ComponentRegistry"

REGISTRY_HEADER_TEMPLATE = "ArgusComponentRegistryHeaderTemplate.txt"
REGISTRY_CPP_TEMPLATE = "ArgusComponentRegistryCppTemplate.txt"
COMPONENT_HEADER_TEMPLATE = "ComponentHeaderTemplate.txt"
DYNAMIC_ALLOC_COMPONENT_HEADER_TEMPLATE = "DynamicAllocComponentHeaderTemplate.txt"
COMPONENT_CPP_DEFINITIONS_TEMPLATE = "ComponentCppTemplateDefinitions.txt"
DYNAMIC_ALLOC_COMPONENT_CPP_DEFINITIONS_TEMPLATE = "DynamicAllocComponentCppTemplateDefinitions.txt"
REMOVE_COMPONENT_BITSET_TEMPLATE = "RemoveComponentCppTemplateBitset.txt"
REMOVE_COMPONENT_VALUES_TEMPLATE = "RemoveComponentCppTemplateValues.txt"
REMOVE_COMPONENT_DYNAMIC_ALLOC_TEMPLATE = "RemoveComponentCppTemplateDynamicAlloc.txt"
COMPONENT_CPP_FLUSH_TEMPLATE = "ComponentCppTemplateFlush.txt"
COMPONENT_CPP_RESET_TEMPLATE = "ComponentCppTemplateReset.txt"
DYNAMIC_ALLOC_COMPONENT_CPP_RESET_TEMPLATE = "DynamicAllocComponentCppTemplateReset.txt"
DEBUG_STRING_LINES_TEMPLATE = "AppendDebugStringCppTemplate.txt"
COMPONENT_SIZE_TESTS_TEMPLATE = "ArgusComponentSizeTestsTemplate.txt"
PER_COMPONENT_SIZE_TESTS_TEMPLATE = "PerComponentSizeTestsTemplate.txt"

REGISTRY_HEADER_FILENAME = "ArgusComponentRegistry.h"
REGISTRY_CPP_FILENAME = "ArgusComponentRegistry.cpp"
COMPONENT_SIZE_TESTS_FILENAME = "ArgusComponentSizeTests.cpp"

_Section = Tuple[str, Callable[[str], List[str]]]


def _read_lines(path: PathLike) -> List[str]:
    with open(path, encoding="utf-8") as stream:
        lines = stream.read().split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _block(lines: Sequence[str]) -> Callable[[str], List[str]]:
    return lambda _line: list(lines)


def _fill(template_path: Path, sections: Iterable[_Section]) -> List[str]:
    """Copy the template, letting the first matching marker decide what replaces a line."""
    sections = list(sections)
    result: List[str] = []
    for line in _read_lines(template_path):
        for marker, expand in sections:
            if marker in line:
                result.extend(expand(line))
                break
        else:
            result.append(line)
    return result


def render_registry_header(parsed: ParseComponentDataOutput, template_directory: PathLike) -> List[str]:
    """Lines of the component registry header."""
    directory = Path(template_directory)
    names = parsed.component_names
    dynamic_names = parsed.dynamic_alloc_component_names
    per_component = parse_component_specific_template(directory / COMPONENT_HEADER_TEMPLATE, names)
    per_dynamic = parse_component_specific_template(
        directory / DYNAMIC_ALLOC_COMPONENT_HEADER_TEMPLATE, dynamic_names
    )
    count = str(len(names) + len(dynamic_names))
    return _fill(
        directory / REGISTRY_HEADER_TEMPLATE,
        [
            ("@@@@@", _block(parsed.component_registry_include_statements)),
            ("^^^^^", _block(parsed.dynamic_alloc_component_registry_include_statements)),
            ("%%%%%", lambda line: [line.replace("%%%%%", count)]),
            ("#####", _block(per_component)),
            ("&&&&&", _block(per_dynamic)),
        ],
    )


def render_registry_cpp(parsed: ParseComponentDataOutput, template_directory: PathLike) -> List[str]:
    """Lines of the component registry source file."""
    directory = Path(template_directory)
    names = parsed.component_names
    dynamic_names = parsed.dynamic_alloc_component_names

    def per(template: str, component_names: Sequence[str]) -> List[str]:
        return parse_component_specific_template(directory / template, component_names)

    definitions = per(COMPONENT_CPP_DEFINITIONS_TEMPLATE, names)
    dynamic_definitions = per(DYNAMIC_ALLOC_COMPONENT_CPP_DEFINITIONS_TEMPLATE, dynamic_names)
    remove_bitset = per(REMOVE_COMPONENT_BITSET_TEMPLATE, names)
    remove_values = per(REMOVE_COMPONENT_VALUES_TEMPLATE, names)
    remove_dynamic = per(REMOVE_COMPONENT_DYNAMIC_ALLOC_TEMPLATE, dynamic_names)
    reset = per(COMPONENT_CPP_RESET_TEMPLATE, names)
    flush = per(COMPONENT_CPP_FLUSH_TEMPLATE, names)
    dynamic_reset = per(DYNAMIC_ALLOC_COMPONENT_CPP_RESET_TEMPLATE, dynamic_names)
    debug_strings = per(DEBUG_STRING_LINES_TEMPLATE, [*names, *dynamic_names])

    return _fill(
        directory / REGISTRY_CPP_TEMPLATE,
        [
            ("@@@@@", _block(definitions)),
            ("^^^^^", _block(dynamic_definitions)),
            ("*****", _block(remove_bitset)),
            ("~~~~~", _block(remove_values)),
            ("?????", _block(remove_dynamic)),
            ("#####", _block(reset)),
            ("$$$$$", _block(flush)),
            ("&&&&&", _block(dynamic_reset)),
            ("%%%%%", _block(debug_strings)),
        ],
    )


def render_component_size_tests(parsed: ParseComponentDataOutput, template_directory: PathLike) -> List[str]:
    """Lines of the per-component size test source file."""
    directory = Path(template_directory)
    per_component = parse_component_specific_template(
        directory / PER_COMPONENT_SIZE_TESTS_TEMPLATE, parsed.component_names
    )
    return _fill(directory / COMPONENT_SIZE_TESTS_TEMPLATE, [("#####", _block(per_component))])


def generate_component_registry_code(parsed: ParseComponentDataOutput, layout: ProjectLayout) -> List[Path]:
    """Render and write the registry header, source and size tests; return the written paths."""
    logger.info("Starting generation of ECS component code.")
    template_directory = layout.template_directory(COMPONENT_REGISTRY_TEMPLATE_SUBDIRECTORY)

    header = render_registry_header(parsed, template_directory)
    cpp = render_registry_cpp(parsed, template_directory)
    size_tests = render_component_size_tests(parsed, template_directory)

    registry_directory = layout.project_directory / COMPONENT_REGISTRY_DIRECTORY_SUFFIX
    tests_directory = registry_directory / ECS_TESTS_DIRECTORY_SUFFIX
    outputs = [
        (registry_directory / REGISTRY_HEADER_FILENAME, header),
        (registry_directory / REGISTRY_CPP_FILENAME, cpp),
        (tests_directory / COMPONENT_SIZE_TESTS_FILENAME, size_tests),
    ]
    for path, lines in outputs:
        write_out_file(path, lines)
    logger.info("Successfully wrote out ECS component implementations.")
    return [path for path, _ in outputs]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the project's component definitions and regenerate the registry code."""
    parser = argparse.ArgumentParser(
        prog="argusrts-registry", description="Generate the ECS component registry from component definitions."
    )
    parser.add_argument("project_directory", nargs="?", default=".", help="root directory of the project")
    args = parser.parse_args(argv)

    layout = ProjectLayout(Path(args.project_directory))
    try:
        parsed = parse_component_data(layout)
        written = generate_component_registry_code(parsed, layout)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for path in written:
        print(path)
    return 0