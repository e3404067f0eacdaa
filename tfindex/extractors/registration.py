"""Registration shape recognizers.

Each recognizer looks for a named declaration in a parsed Go file and reads
the literals it returns:

- ``SupportedResources`` / ``SupportedDataSources``: ``map[string]*T{"x": fn()}``
- ``Resources`` / ``DataSources``: ``[]sdk.Resource{FooResource{}}``
- ``EphemeralResources``: ``[]func() ephemeral.EphemeralResource{NewFoo}``

A returned identifier is followed to the literal assigned to it inside the
same function. A file without the declaration yields an empty result. Several
declarations with the name (one per receiver) are merged in source order.
"""

from tfindex.ast_extractors.go_nodes import (
    Assign,
    Call,
    CompositeLit,
    FuncDecl,
    Ident,
    KeyValue,
    Node,
    Return,
    StringLit,
    unwrap_literal,
    walk,
)
from tfindex.pipeline.structures import SourceUnit

SUPPORTED_RESOURCES = "SupportedResources"
SUPPORTED_DATA_SOURCES = "SupportedDataSources"
RESOURCES = "Resources"
DATA_SOURCES = "DataSources"
EPHEMERAL_RESOURCES = "EphemeralResources"


def find_declarations(unit: SourceUnit, name: str) -> list[FuncDecl]:
    """Every function or method in the file with the given name, in source order.

    Go allows one method name on several receivers, so a file can hold more
    than one ``Resources()``.
    """
    return [func for func in unit.functions if func.name == name]


def _declared_literals(unit: SourceUnit, name: str) -> list[CompositeLit]:
    literals = []
    for func in find_declarations(unit, name):
        literals.extend(returned_literals(func))
    return literals


def _assigned_literals(func: FuncDecl, name: str) -> list[CompositeLit]:
    """Literals assigned to ``name`` anywhere in the function body, in source order."""
    literals = []
    for node in walk(func.body):
        if not isinstance(node, Assign):
            continue
        for index, target in enumerate(node.targets):
            if not isinstance(target, Ident) or target.name != name:
                continue
            if index >= len(node.values):
                continue
            literal = unwrap_literal(node.values[index])
            if literal is not None:
                literals.append(literal)
    return literals


def returned_literals(func: FuncDecl) -> list[CompositeLit]:
    """Composite literals a function returns, directly or through a local variable."""
    literals = []
    for node in walk(func.body):
        if not isinstance(node, Return):
            continue
        for value in node.values:
            literal = unwrap_literal(value)
            if literal is not None:
                literals.append(literal)
            elif isinstance(value, Ident):
                literals.extend(_assigned_literals(func, value.name))
    return literals


def _table_entries(literal: CompositeLit) -> dict[str, str]:
    """Read ``"terraform_type": implementationFunc()`` pairs."""
    mappings = {}
    for element in literal.elements:
        if not isinstance(element, KeyValue):
            continue
        if not isinstance(element.key, StringLit) or not element.key.value:
            continue
        value = element.value
        if not isinstance(value, Call) or not isinstance(value.func, Ident):
            continue
        mappings[element.key.value] = value.func.name
    return mappings


def _struct_entries(literal: CompositeLit) -> list[str]:
    """Read ``FooResource{}`` elements; only plain type identifiers count."""
    types = []
    for element in literal.elements:
        inner = unwrap_literal(element)
        if inner is None or not inner.type_name.isidentifier():
            continue
        types.append(inner.type_name)
    return types


def _function_entries(literal: CompositeLit) -> list[str]:
    """Read bare function identifiers (references, not calls)."""
    return [element.name for element in literal.elements if isinstance(element, Ident)]


def extract_table(unit: SourceUnit, func_name: str) -> dict[str, str]:
    """Legacy table recognizer. Duplicate keys keep the last value."""
    mappings: dict[str, str] = {}
    for literal in _declared_literals(unit, func_name):
        mappings.update(_table_entries(literal))
    return mappings


def extract_struct_list(unit: SourceUnit, func_name: str) -> list[str]:
    """Modern list recognizer. Order and duplicates are preserved."""
    types: list[str] = []
    for literal in _declared_literals(unit, func_name):
        types.extend(_struct_entries(literal))
    return types


def extract_function_list(unit: SourceUnit, func_name: str) -> list[str]:
    """Ephemeral list recognizer."""
    functions: list[str] = []
    for literal in _declared_literals(unit, func_name):
        functions.extend(_function_entries(literal))
    return functions


def extract_supported_resources(unit: SourceUnit) -> dict[str, str]:
    return extract_table(unit, SUPPORTED_RESOURCES)


def extract_supported_data_sources(unit: SourceUnit) -> dict[str, str]:
    return extract_table(unit, SUPPORTED_DATA_SOURCES)


def extract_resources(unit: SourceUnit) -> list[str]:
    return extract_struct_list(unit, RESOURCES)


def extract_data_sources(unit: SourceUnit) -> list[str]:
    return extract_struct_list(unit, DATA_SOURCES)


def extract_ephemeral_resources(unit: SourceUnit) -> list[str]:
    return extract_function_list(unit, EPHEMERAL_RESOURCES)


def literal_type_of(expr: Node | None) -> str | None:
    """Type name of ``T{}`` or ``&T{}``, if it is a plain identifier."""
    literal = unwrap_literal(expr)
    if literal is None or not literal.type_name.isidentifier():
        return None
    return literal.type_name
