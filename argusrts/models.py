"""Data shared by the code-generator's parsing and rendering steps."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

PROPERTY_DELIMITER = "ARGUS_PROPERTY"
PROPERTY_IGNORE_DELIMITER = "ARGUS_IGNORE"
PROPERTY_STATIC_DATA_DELIMITER = "ARGUS_STATIC_DATA"
UE_PROPERTY_DELIMITER = "UPROPERTY"

COMPONENT_DEFINITION_DIRECTORY_NAME = "ComponentDefinitions"
COMPONENT_DEFINITION_DIRECTORY_SUFFIX = "Source/Argus/ECS/ComponentDefinitions"
DYNAMIC_ALLOC_COMPONENT_DEFINITION_DIRECTORY_NAME = "DynamicAllocComponentDefinitions"
DYNAMIC_ALLOC_COMPONENT_DEFINITION_DIRECTORY_SUFFIX = "Source/Argus/ECS/DynamicAllocComponentDefinitions"
STATIC_DATA_RECORD_DEFINITIONS_DIRECTORY_NAME = "RecordDefinitions"
STATIC_DATA_RECORD_DEFINITIONS_DIRECTORY_SUFFIX = "Source/Argus/StaticData/RecordDefinitions"
TEMPLATE_DIRECTORY_SUFFIX = "Plugins/ArgusCodeGenerator/Source/ArgusCodeGenerator/Private/Templates"
STRUCT_DELIMITER = "struct"
ARGUS_API_DELIMITER = "ARGUS_API"
VAR_DELIMITER = "m_"


@dataclass
class ParsedVariableData:
    type_name: str = ""
    var_name: str = ""
    default_value: str = ""
    property_macro: str = ""
    static_data_type_name: str = ""


@dataclass
class ParseComponentDataOutput:
    component_names: List[str] = field(default_factory=list)
    component_registry_include_statements: List[str] = field(default_factory=list)
    component_data_asset_include_statements: List[str] = field(default_factory=list)
    component_variable_data: List[List[ParsedVariableData]] = field(default_factory=list)

    dynamic_alloc_component_names: List[str] = field(default_factory=list)
    dynamic_alloc_component_registry_include_statements: List[str] = field(default_factory=list)
    dynamic_alloc_component_data_asset_include_statements: List[str] = field(default_factory=list)
    dynamic_alloc_component_variable_data: List[List[ParsedVariableData]] = field(default_factory=list)


@dataclass
class CombinedComponentDataOutput:
    component_names: List[str] = field(default_factory=list)
    component_registry_include_statements: List[str] = field(default_factory=list)
    component_data_asset_include_statements: List[str] = field(default_factory=list)
    component_variable_data: List[List[ParsedVariableData]] = field(default_factory=list)


@dataclass
class ParseStaticDataRecordsOutput:
    static_data_include_statements: List[str] = field(default_factory=list)
    static_data_record_names: List[str] = field(default_factory=list)
    static_data_record_variable_data: List[List[ParsedVariableData]] = field(default_factory=list)


@dataclass
class FileWriteData:
    filename: str = ""
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectLayout:
    """Locates the generator's inputs and templates inside a project directory."""

    project_directory: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "project_directory", Path(self.project_directory))

    @classmethod
    def from_project_file(cls, project_file: Union[str, Path]) -> "ProjectLayout":
        """Build a layout from the path of the project file itself."""
        return cls(Path(project_file).parent)

    def template_directory(self, subdirectory: str = "") -> Path:
        base = self.project_directory / TEMPLATE_DIRECTORY_SUFFIX
        return base / subdirectory if subdirectory else base

    def component_definitions_directory(self) -> Path:
        return self.project_directory / COMPONENT_DEFINITION_DIRECTORY_SUFFIX

    def dynamic_alloc_component_definitions_directory(self) -> Path:
        return self.project_directory / DYNAMIC_ALLOC_COMPONENT_DEFINITION_DIRECTORY_SUFFIX

    def static_data_record_definitions_directory(self) -> Path:
        return self.project_directory / STATIC_DATA_RECORD_DEFINITIONS_DIRECTORY_SUFFIX


def combine_static_and_dynamic_component_data(
    parsed: ParseComponentDataOutput,
) -> CombinedComponentDataOutput:
    """Join static and dynamically allocated component data, static ones first."""
    return CombinedComponentDataOutput(
        component_names=[*parsed.component_names, *parsed.dynamic_alloc_component_names],
        component_registry_include_statements=[
            *parsed.component_registry_include_statements,
            *parsed.dynamic_alloc_component_registry_include_statements,
        ],
        component_data_asset_include_statements=[
            *parsed.component_data_asset_include_statements,
            *parsed.dynamic_alloc_component_data_asset_include_statements,
        ],
        component_variable_data=copy.deepcopy(
            [*parsed.component_variable_data, *parsed.dynamic_alloc_component_variable_data]
        ),
    )