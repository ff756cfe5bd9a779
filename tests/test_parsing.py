import os

import pytest

from argusrts.models import (
    ParseComponentDataOutput,
    ParsedVariableData,
    ParseStaticDataRecordsOutput,
    ProjectLayout,
)
from argusrts.parsing import (
    parse_component_data,
    parse_component_data_from_file,
    parse_component_specific_template,
    parse_property_macro,
    parse_record_class_declaration,
    parse_static_data_records,
    parse_static_data_records_from_file,
    parse_struct_declaration,
    parse_variable_declaration,
    write_out_file,
)

HEALTH_COMPONENT = """struct HealthComponent
{
\tARGUS_PROPERTY(EditAnywhere)
\tuint32 m_health = 1000u;
\t// ignored m_comment;
\tuint32 m_maximumHealth = 1000u;
\tARGUS_IGNORE()
\tfloat m_hidden;
};
"""

FACTION_RECORD = """UCLASS()
class ARGUS_API UFactionRecord : public UArgusStaticRecord
{
\tGENERATED_BODY()
public:
\tUPROPERTY(EditAnywhere)
\tFString m_factionName = "";
};
"""


def _project(tmp_path):
    layout = ProjectLayout(tmp_path)
    for directory in (
        layout.component_definitions_directory(),
        layout.dynamic_alloc_component_definitions_directory(),
        layout.static_data_record_definitions_directory(),
    ):
        directory.mkdir(parents=True)
    return layout


@pytest.mark.parametrize(
    "line",
    [
        "struct HealthComponent : public Base",
        "struct HealthComponent {",
        "struct HealthComponent",
    ],
)
def test_struct_declaration_names(line):
    output = ParseComponentDataOutput()
    assert parse_struct_declaration(line, "inc", output, False) is True
    assert output.component_names == ["HealthComponent"]
    assert output.component_data_asset_include_statements == ["inc"]
    assert output.component_variable_data == [[]]
    assert output.dynamic_alloc_component_names == []


def test_struct_declaration_dynamic():
    output = ParseComponentDataOutput()
    assert parse_struct_declaration("struct SpatialPartitioningComponent", "inc", output, True)
    assert output.dynamic_alloc_component_names == ["SpatialPartitioningComponent"]
    assert output.dynamic_alloc_component_variable_data == [[]]
    assert output.component_names == []


def test_non_struct_line_is_ignored():
    output = ParseComponentDataOutput()
    assert parse_struct_declaration("\tfloat m_value;", "inc", output, False) is False
    assert output == ParseComponentDataOutput()


def test_variable_declaration_with_default():
    data = [[]]
    assert parse_variable_declaration("\tfloat m_speed = 2.5f;", False, data)
    assert data == [[ParsedVariableData(type_name="\tfloat", var_name="m_speed", default_value="2.5f")]]


def test_variable_declaration_without_default():
    data = [[]]
    assert parse_variable_declaration("\tuint16 m_target;", False, data)
    assert data[0][0].var_name == "m_target"
    assert data[0][0].default_value == ""


def test_variable_declaration_needs_terminator_or_assignment():
    data = [[]]
    assert parse_variable_declaration("\tuint16 m_target", False, data) is False
    assert parse_variable_declaration("\tno members here;", False, data) is False
    assert data == [[]]


def test_variable_declaration_completes_property_entry():
    data = [[]]
    assert parse_property_macro("\tARGUS_PROPERTY(EditAnywhere)", data)
    assert parse_variable_declaration("\tint32 m_count = 3;", True, data)
    assert len(data[0]) == 1
    entry = data[0][0]
    assert entry.property_macro == "\tARGUS_PROPERTY(EditAnywhere)"
    assert entry.var_name == "m_count"
    assert entry.default_value == "3"


def test_repeated_variable_is_rejected():
    data = [[]]
    assert parse_variable_declaration("\tint32 m_count;", False, data)
    assert parse_variable_declaration("\tint32 m_count = 4;", False, data) is False
    assert len(data[0]) == 1


def test_property_macro_markers():
    data = [[]]
    for line in ("ARGUS_IGNORE()", "ARGUS_STATIC_DATA(UFactionRecord)", "UPROPERTY()"):
        assert parse_property_macro(line, data)
    assert [entry.property_macro for entry in data[0]] == [
        "ARGUS_IGNORE()",
        "ARGUS_STATIC_DATA(UFactionRecord)",
        "UPROPERTY()",
    ]
    assert parse_property_macro("\tfloat m_value;", data) is False
    assert len(data[0]) == 3


def test_declaration_before_any_type_raises():
    with pytest.raises(ValueError):
        parse_property_macro("ARGUS_IGNORE()", [])
    with pytest.raises(ValueError):
        parse_variable_declaration("\tint32 m_count;", False, [])


def test_record_class_declaration():
    output = ParseStaticDataRecordsOutput()
    assert parse_record_class_declaration("class ARGUS_API UFactionRecord : public UArgusStaticRecord", output)
    assert output.static_data_record_names == ["UFactionRecord"]
    assert output.static_data_record_variable_data == [[]]
    assert parse_record_class_declaration("class UOther", output) is False
    assert output.static_data_record_names == ["UFactionRecord"]


def test_component_file(tmp_path):
    layout = _project(tmp_path)
    path = layout.component_definitions_directory() / "HealthComponent.h"
    path.write_text(HEALTH_COMPONENT, encoding="utf-8")
    output = ParseComponentDataOutput()
    parse_component_data_from_file(path, output, False)

    relative = os.path.join("ComponentDefinitions", "HealthComponent.h")
    assert output.component_names == ["HealthComponent"]
    assert output.component_registry_include_statements == [f'#include "{relative}"']
    assert output.component_data_asset_include_statements == [f'#include "..\\{relative}"']
    variables = output.component_variable_data[0]
    assert [v.var_name for v in variables] == ["m_health", "m_maximumHealth", "m_hidden"]
    assert [v.property_macro for v in variables] == [
        "\tARGUS_PROPERTY(EditAnywhere)",
        "",
        "\tARGUS_IGNORE()",
    ]
    assert variables[0].type_name == "\tuint32"
    assert variables[0].default_value == "1000u"


def test_component_file_outside_definitions_directory(tmp_path):
    path = tmp_path / "HealthComponent.h"
    path.write_text(HEALTH_COMPONENT, encoding="utf-8")
    with pytest.raises(ValueError):
        parse_component_data_from_file(path, ParseComponentDataOutput(), False)


def test_parse_component_data(tmp_path):
    layout = _project(tmp_path)
    (layout.component_definitions_directory() / "HealthComponent.h").write_text(HEALTH_COMPONENT, encoding="utf-8")
    (layout.dynamic_alloc_component_definitions_directory() / "SpatialPartitioningComponent.h").write_text(
        "struct SpatialPartitioningComponent\n{\n\tKDTree m_tree;\n};\n", encoding="utf-8"
    )
    output = parse_component_data(layout)
    assert output.component_names == ["HealthComponent"]
    assert output.dynamic_alloc_component_names == ["SpatialPartitioningComponent"]
    assert output.dynamic_alloc_component_variable_data[0][0].var_name == "m_tree"
    assert len(output.dynamic_alloc_component_registry_include_statements) == 1


def test_parse_component_data_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_component_data(ProjectLayout(tmp_path))


def test_static_data_records(tmp_path):
    layout = _project(tmp_path)
    (layout.static_data_record_definitions_directory() / "FactionRecord.h").write_text(
        FACTION_RECORD, encoding="utf-8"
    )
    output = parse_static_data_records(layout)
    relative = os.path.join("RecordDefinitions", "FactionRecord.h")
    assert output.static_data_include_statements == [f'#include "{relative}"']
    assert output.static_data_record_names == ["UFactionRecord"]
    entry = output.static_data_record_variable_data[0][0]
    assert entry.property_macro == "\tUPROPERTY(EditAnywhere)"
    assert entry.var_name == "m_factionName"
    assert entry.default_value == '""'


def test_static_data_file_outside_directory(tmp_path):
    path = tmp_path / "FactionRecord.h"
    path.write_text(FACTION_RECORD, encoding="utf-8")
    with pytest.raises(ValueError):
        parse_static_data_records_from_file(path, ParseStaticDataRecordsOutput())


def test_component_specific_template(tmp_path):
    path = tmp_path / "template.txt"
    path.write_text("#pragma region #####\nstatic ##### s_#####s;\n", encoding="utf-8")
    lines = parse_component_specific_template(path, ["A", "B"])
    assert lines == [
        "#pragma region A",
        "static A s_As;",
        "#pragma region B",
        "static B s_Bs;",
    ]


def test_write_out_file_round_trip(tmp_path):
    path = tmp_path / "out.h"
    path.write_text("old contents that should vanish\n", encoding="utf-8")
    lines = ["#pragma once", "", "struct X {};"]
    write_out_file(path, lines)
    assert parse_component_specific_template(path, [""]) == lines


def test_write_out_file_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        write_out_file(tmp_path / "missing" / "out.h", ["x"])