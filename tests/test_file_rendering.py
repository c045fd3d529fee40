import importlib.util
from pathlib import Path

import pytest

from emitter import RenderOptions, StatementBalanceError, render_file
from lexical import JAVASCRIPT
from names import (
    BOOLEAN,
    COMPARABLE,
    DOUBLE,
    INT,
    LIST,
    STRING,
    UNIT,
    ClassName,
    LambdaTypeName,
    MemberName,
    TypeVariableName,
    WildcardTypeName,
)
from specs import (
    EnumConstant,
    FileSpec,
    FunSpec,
    KModifier,
    ParameterSpec,
    PropertySpec,
    TypeAliasSpec,
    TypeSpec,
)
from template import CodeBlock

GREETER_SOURCE = (
    "// Generated by kpoet. Do not edit.\n"
    "package com.example.greeter\n"
    "\n"
    "class Greeter(private val name: String) {\n"
    '  fun greet(): String = "Hello, $name"\n'
    "}\n"
    "\n"
    "fun main() {\n"
    '  println(Greeter("World").greet())\n'
    "}\n"
)


def _load_case(name: str):
    path = Path("tests/cases") / f"{name}.py"
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.build()


def _render(*members, package="com.example", **options):
    file_spec = FileSpec(package, "Test", members=list(members))
    return render_file(file_spec, RenderOptions(**options)).source


def test_render_greeter():
    result = render_file(_load_case("greeter"))
    assert result.source == GREETER_SOURCE
    assert result.imports == ()
    assert result.relative_path == "com/example/greeter/Greeter.kt"


def test_many_parameters_go_one_per_line():
    function = FunSpec(
        "sum",
        parameters=[ParameterSpec(name, INT) for name in ("a", "b", "c")],
        return_type=INT,
        body=CodeBlock.builder().add_statement("return a + b + c").build(),
    )
    assert _render(function) == (
        "package com.example\n"
        "\n"
        "fun sum(\n"
        "  a: Int,\n"
        "  b: Int,\n"
        "  c: Int,\n"
        "): Int = a + b + c\n"
    )


def test_enum():
    roshambo = TypeSpec.enum(
        "Roshambo",
        enum_constants=[EnumConstant("ROCK"), EnumConstant("PAPER"), EnumConstant("SCISSORS")],
    )
    assert _render(roshambo, package="") == (
        "enum class Roshambo {\n"
        "  ROCK,\n"
        "  PAPER,\n"
        "  SCISSORS\n"
        "}\n"
    )


def test_enum_with_constructor_and_function():
    size = TypeSpec.enum(
        "Size",
        primary_constructor=FunSpec.constructor(parameters=[ParameterSpec("inches", INT)]),
        properties=[PropertySpec("inches", INT, initializer="inches")],
        enum_constants=[
            EnumConstant("SMALL", arguments=["8"]),
            EnumConstant("LARGE", arguments=["12"]),
        ],
        functions=[
            FunSpec(
                "isLarge",
                return_type=BOOLEAN,
                body=CodeBlock.builder().add_statement("return this == LARGE").build(),
            )
        ],
    )
    assert _render(size, package="") == (
        "enum class Size(val inches: Int) {\n"
        "  SMALL(8),\n"
        "  LARGE(12);\n"
        "\n"
        "  fun isLarge(): Boolean = this == LARGE\n"
        "}\n"
    )


def test_interface_functions_are_abstract():
    shape = TypeSpec.interface("Shape", functions=[FunSpec("area", return_type=DOUBLE)])
    assert _render(shape, package="") == "interface Shape {\n  fun area(): Double\n}\n"


def test_class_with_supertypes_and_companion():
    circle = TypeSpec.class_(
        "Circle",
        primary_constructor=FunSpec.constructor(parameters=[ParameterSpec("radius", DOUBLE)]),
        superclass=ClassName("com.example", "Base"),
        superclass_constructor_arguments=['"circle"'],
        superinterfaces=[ClassName("com.example", "Shape")],
        functions=[
            FunSpec(
                "area",
                modifiers=[KModifier.OVERRIDE],
                return_type=DOUBLE,
                body=CodeBlock.builder()
                .add_statement("return %M * radius * radius", MemberName("kotlin.math", "PI"))
                .build(),
            )
        ],
        types=[
            TypeSpec.companion_object(
                properties=[PropertySpec("UNIT", DOUBLE, modifiers=[KModifier.CONST], initializer="1.0")]
            )
        ],
    )
    assert _render(circle) == (
        "package com.example\n"
        "\n"
        "import kotlin.math.PI\n"
        "\n"
        'class Circle(radius: Double) : Base("circle"), Shape {\n'
        "  override fun area(): Double = PI * radius * radius\n"
        "\n"
        "  companion object {\n"
        "    const val UNIT: Double = 1.0\n"
        "  }\n"
        "}\n"
    )


def test_long_statements_wrap_with_double_indent():
    function = FunSpec(
        "log",
        body=CodeBlock.builder()
        .add_statement("println(%S + %S + %S)", "alpha", "beta", "gamma")
        .build(),
    )
    assert _render(function, package="", column_limit=30) == (
        "fun log() {\n"
        '  println("alpha" + "beta" +\n'
        '      "gamma")\n'
        "}\n"
    )


def test_kdoc():
    function = FunSpec(
        "answer",
        kdoc="Returns the answer.\n\nAlways 42.",
        return_type=INT,
        body=CodeBlock.builder().add_statement("return %L", 42).build(),
    )
    assert _render(function, package="") == (
        "/**\n"
        " * Returns the answer.\n"
        " *\n"
        " * Always 42.\n"
        " */\n"
        "fun answer(): Int = 42\n"
    )


def test_parameter_kdoc_becomes_param_tags():
    function = FunSpec(
        "add",
        kdoc="Adds two numbers.",
        parameters=[
            ParameterSpec("a", INT, kdoc="the first addend"),
            ParameterSpec("b", INT, kdoc=CodeBlock.of("the second, a %T\n", INT)),
        ],
        return_type=INT,
        body=CodeBlock.builder().add_statement("return a + b").build(),
    )
    assert _render(function, package="") == (
        "/**\n"
        " * Adds two numbers.\n"
        " *\n"
        " * @param a the first addend\n"
        " * @param b the second, a Int\n"
        " */\n"
        "fun add(a: Int, b: Int): Int = a + b\n"
    )


def test_primary_constructor_kdoc_is_documented_on_the_class():
    point = TypeSpec.class_(
        "Point",
        kdoc="A point.\n",
        primary_constructor=FunSpec.constructor(
            kdoc="Creates a point.",
            parameters=[ParameterSpec("x", INT, kdoc="horizontal position")],
        ),
    )
    assert _render(point, package="") == (
        "/**\n"
        " * A point.\n"
        " *\n"
        " * @constructor Creates a point.\n"
        " * @param x horizontal position\n"
        " */\n"
        "class Point(x: Int)\n"
    )


def test_multiline_string_in_statement_keeps_margin():
    prop = PropertySpec("text", STRING, initializer=CodeBlock.of("%S", "a\nb"))
    assert _render(prop, package="") == (
        'val text: String = """\n'
        "    |a\n"
        "    |b\n"
        '    """.trimMargin()\n'
    )


def test_class_name_guessing():
    entry = ClassName.best_guess("java.util.Map.Entry")
    assert entry.package_name == "java.util"
    assert entry.simple_names == ("Map", "Entry")
    assert entry.peer_class("Other").canonical_name == "java.util.Map.Other"
    with pytest.raises(ValueError):
        ClassName.best_guess("lowercase.only")


def test_generic_function_and_lambda_types():
    t = TypeVariableName("T")
    largest = FunSpec(
        "largest",
        type_variables=[TypeVariableName("T", bounds=(COMPARABLE.parameterized_by(t),))],
        parameters=[ParameterSpec("items", LIST.parameterized_by(WildcardTypeName.producer_of(t)))],
        return_type=t.copy(nullable=True),
        body=CodeBlock.builder().add_statement("return items.maxOrNull()").build(),
    )
    handler = PropertySpec(
        "handler",
        LambdaTypeName(receiver=STRING, parameters=(INT,), return_type=UNIT, nullable=True),
        mutable=True,
        initializer="null",
    )
    assert _render(largest, handler, package="") == (
        "fun <T : Comparable<T>> largest(items: List<out T>): T? = items.maxOrNull()\n"
        "\n"
        "var handler: (String.(Int) -> Unit)? = null\n"
    )


def test_type_alias():
    alias = TypeAliasSpec("Names", STRING, modifiers=[KModifier.INTERNAL])
    assert _render(alias, package="") == "internal typealias Names = String\n"


def test_unbalanced_statement_fails_render():
    function = FunSpec("broken", body=CodeBlock.of("«a«b»»"))
    with pytest.raises(StatementBalanceError):
        _render(function)


def test_unclosed_statement_fails_render():
    function = FunSpec("broken", body=CodeBlock.of("«val a = 1\nval b = 2\n"))
    with pytest.raises(StatementBalanceError):
        _render(function)


def test_backticked_name_is_not_wrapped_at_its_spaces():
    source = _render(FunSpec("does the thing correctly"), package="", column_limit=20)
    assert "fun `does the thing correctly`()" in source
    for line in source.splitlines():
        assert line.count("`") % 2 == 0


def test_javascript_policy():
    prop = PropertySpec("class", STRING, initializer=CodeBlock.of("%S", 'a"b'))
    file_spec = FileSpec("", "Names", members=[prop])
    result = render_file(file_spec, RenderOptions(policy=JAVASCRIPT))
    assert result.source == 'import kotlin.String\n\nval class_: String = "a\\"b"\n'
    assert result.relative_path == "Names.js"


def test_render_options_validation():
    with pytest.raises(ValueError):
        RenderOptions(column_limit=1)
    with pytest.raises(ValueError):
        RenderOptions(indent="--")
