import pytest

from emitter import render_file
from lexical import KOTLIN
from names import INT, STRING, ClassName, Import, MemberName
from resolver import (
    ImportConflictError,
    Reference,
    ReferenceSet,
    build_import_table,
    collect_references,
    lookup_type_name,
)
from specs import FileSpec, FunSpec, ParameterSpec, PropertySpec, TypeSpec
from template import CodeBlock

UTIL_DATE = ClassName("java.util", "Date")
SQL_DATE = ClassName("java.sql", "Date")


def _convert(**kwargs):
    return FunSpec(
        "convert",
        parameters=[ParameterSpec("value", UTIL_DATE)],
        return_type=SQL_DATE,
        body=CodeBlock.builder().add_statement("return %T(value.time)", SQL_DATE).build(),
        **kwargs,
    )


def test_first_seen_simple_name_is_imported():
    result = render_file(FileSpec("com.example", "Dates", members=[_convert()]))
    assert result.imports == ("java.util.Date",)
    assert result.source == (
        "package com.example\n"
        "\n"
        "import java.util.Date\n"
        "\n"
        "fun convert(value: Date): java.sql.Date = java.sql.Date(value.time)\n"
    )


def test_references_are_collected_in_emission_order():
    references = collect_references(FileSpec("com.example", "Dates", members=[_convert()]))
    assert references.canonical_names() == ("java.util.Date", "java.sql.Date")
    assert len(references) == 3


def test_explicit_alias():
    file_spec = FileSpec(
        "com.example",
        "Dates",
        members=[_convert()],
        imports=[Import(SQL_DATE, alias="SqlDate")],
    )
    result = render_file(file_spec)
    assert result.imports == ("java.sql.Date as SqlDate", "java.util.Date")
    assert "fun convert(value: Date): SqlDate = SqlDate(value.time)\n" in result.source


def test_conflicting_explicit_imports():
    file_spec = FileSpec(
        "com.example",
        "Dates",
        members=[_convert()],
        imports=[Import(UTIL_DATE), Import(SQL_DATE)],
    )
    with pytest.raises(ImportConflictError, match="conflicting imports for Date"):
        render_file(file_spec)


def test_one_target_with_two_aliases():
    imports = [Import(SQL_DATE, alias="SqlDate"), Import(SQL_DATE, alias="Timestamp")]
    with pytest.raises(ImportConflictError, match="imported as both SqlDate and Timestamp"):
        build_import_table(ReferenceSet(), "com.example", imports)


def test_nested_types_shadow_imports():
    outer = ClassName("com.example", "Outer")
    entry = outer.nested_class("Entry")
    map_entry = ClassName("java.util", "Map", "Entry")
    spec = TypeSpec.class_(
        "Outer",
        properties=[
            PropertySpec("local", entry, initializer=CodeBlock.of("%T()", entry)),
            PropertySpec("external", map_entry.copy(nullable=True), initializer="null"),
        ],
        types=[TypeSpec.class_("Entry")],
    )
    result = render_file(FileSpec("com.example", "Outer", members=[spec]))
    assert result.imports == ("java.util.Map",)
    assert result.source == (
        "package com.example\n"
        "\n"
        "import java.util.Map\n"
        "\n"
        "class Outer {\n"
        "  val local: Entry = Entry()\n"
        "\n"
        "  val external: Map.Entry? = null\n"
        "\n"
        "  class Entry\n"
        "}\n"
    )


def test_same_package_name_blocks_import():
    local_date = ClassName("com.example", "Date")
    function = FunSpec(
        "dates",
        body=CodeBlock.builder()
        .add_statement("val a = %T()", UTIL_DATE)
        .add_statement("val b = %T()", local_date)
        .build(),
    )
    result = render_file(FileSpec("com.example", "Dates", members=[function]))
    assert result.imports == ()
    assert "val a = java.util.Date()\n" in result.source
    assert "val b = Date()\n" in result.source


def test_default_imports_are_not_written():
    prop = PropertySpec("count", INT, initializer="0")
    result = render_file(FileSpec("com.example", "Count", members=[prop]))
    assert result.imports == ()
    assert result.source == "package com.example\n\nval count: Int = 0\n"


def test_kdoc_references_are_not_imported():
    function = FunSpec("now", kdoc=CodeBlock.of("See %T.", UTIL_DATE))
    result = render_file(FileSpec("com.example", "Now", members=[function]))
    assert result.imports == ()
    assert " * See java.util.Date.\n" in result.source


def test_member_imports():
    launch = MemberName("kotlinx.coroutines", "launch")
    function = FunSpec(
        "start",
        body=CodeBlock.builder().add_statement("%M {}", launch).build(),
    )
    result = render_file(FileSpec("com.example", "Start", members=[function]))
    assert result.imports == ("kotlinx.coroutines.launch",)
    assert "  launch {}\n" in result.source


def test_member_shadowed_by_function_in_scope():
    launch = MemberName("kotlinx.coroutines", "launch")
    spec = TypeSpec.class_(
        "Scope",
        functions=[
            FunSpec("launch"),
            FunSpec("start", body=CodeBlock.builder().add_statement("%M {}", launch).build()),
        ],
    )
    result = render_file(FileSpec("com.example", "Scope", members=[spec]))
    assert result.imports == ()
    assert "kotlinx.coroutines.launch {}" in result.source


def test_types_and_members_use_separate_namespaces():
    foo_type = ClassName("com.a", "Foo")
    foo_member = MemberName("com.b", "Foo")
    function = FunSpec(
        "make",
        return_type=foo_type,
        body=CodeBlock.builder().add_statement("return %M()", foo_member).build(),
    )
    result = render_file(FileSpec("com.example", "Make", members=[function]))
    assert result.imports == ("com.a.Foo", "com.b.Foo")
    assert "fun make(): Foo = Foo()\n" in result.source


def test_clashing_members_keep_later_one_qualified():
    first = MemberName("com.a", "of")
    second = MemberName("com.b", "of")
    function = FunSpec(
        "pair",
        body=CodeBlock.builder().add_statement("%M(1)", first).add_statement("%M(2)", second).build(),
    )
    result = render_file(FileSpec("com.example", "Pair", members=[function]))
    assert result.imports == ("com.a.of",)
    assert "  of(1)\n  com.b.of(2)\n" in result.source


def test_keyword_package_segments_are_escaped():
    thing = ClassName("com.example.in", "Thing")
    prop = PropertySpec("thing", thing.copy(nullable=True), initializer="null")
    result = render_file(FileSpec("com.example", "Things", members=[prop]))
    assert result.imports == ("com.example.`in`.Thing",)


def test_build_import_table_directly():
    references = ReferenceSet([Reference(UTIL_DATE), Reference(SQL_DATE), Reference(STRING)])
    table = build_import_table(references, "com.example")
    assert table.lines() == ["java.util.Date"]
    assert table.imported_types["Date"] == UTIL_DATE
    assert table.imported_types["String"] == STRING


def test_member_imported_for_top_level_call_stays_qualified_where_shadowed():
    launch = MemberName("kotlinx.coroutines", "launch")
    call = CodeBlock.builder().add_statement("%M {}", launch).build()
    scope = TypeSpec.class_(
        "Scope",
        functions=[FunSpec("launch"), FunSpec("start", body=call)],
    )
    result = render_file(FileSpec("com.example", "Scope", members=[FunSpec("go", body=call), scope]))
    assert result.imports == ("kotlinx.coroutines.launch",)
    assert "fun go() {\n  launch {}\n}\n" in result.source
    assert "  fun start() {\n    kotlinx.coroutines.launch {}\n  }\n" in result.source


def test_shadowed_object_member_is_qualified_by_its_object():
    build = MemberName.of(ClassName("com.example.util", "Lists"), "build")
    builder = TypeSpec.class_(
        "Builder",
        functions=[
            FunSpec("build"),
            FunSpec("make", body=CodeBlock.builder().add_statement("%M()", build).build()),
        ],
    )
    result = render_file(FileSpec("com.example", "Builder", members=[builder]))
    assert result.imports == ("com.example.util.Lists",)
    assert "    Lists.build()\n" in result.source


def test_nested_name_hidden_by_inner_declaration():
    outer = ClassName("com.example", "Outer")
    outer_inner = outer.nested_class("Inner")
    a_inner = outer.nested_class("A").nested_class("Inner")
    a = TypeSpec.class_(
        "A",
        properties=[
            PropertySpec("shared", outer_inner.copy(nullable=True), initializer="null"),
            PropertySpec("own", a_inner.copy(nullable=True), initializer="null"),
        ],
        types=[TypeSpec.class_("Inner")],
    )
    spec = TypeSpec.class_("Outer", types=[TypeSpec.class_("Inner"), a])
    result = render_file(FileSpec("com.example", "Outer", members=[spec]))
    assert result.imports == ()
    assert "    val shared: Outer.Inner? = null\n" in result.source
    assert "    val own: Inner? = null\n" in result.source


def test_resolution_is_repeatable():
    file_spec = FileSpec("com.example", "Dates", members=[_convert()])
    references = collect_references(file_spec)
    table = build_import_table(references, "com.example")
    first = lookup_type_name(SQL_DATE, (), table, "com.example", KOTLIN)
    second = lookup_type_name(SQL_DATE, (), table, "com.example", KOTLIN)
    assert first == second == "java.sql.Date"
    assert lookup_type_name(UTIL_DATE, (), table, "com.example", KOTLIN) == "Date"
    assert render_file(file_spec) == render_file(file_spec)
