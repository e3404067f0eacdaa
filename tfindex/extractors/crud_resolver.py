"""Extract CRUD callback names from legacy plugin SDK resource definitions.

Handles both shapes used across the provider:

    func resourceFoo() *pluginsdk.Resource {
        return &pluginsdk.Resource{Create: resourceFooCreate, ...}
    }

    func resourceBar() *pluginsdk.Resource {
        resource := &pluginsdk.Resource{ReadContext: helpers.ResourceBarRead}
        return resource
    }

Only top-level keys of the literal are read; nested ``Timeouts`` or ``Schema``
literals never contribute.
"""

from collections.abc import Iterable, Mapping

from tfindex.ast_extractors.go_nodes import (
    Assign,
    CompositeLit,
    FuncDecl,
    Ident,
    KeyValue,
    Return,
    Unary,
    callable_name,
    walk,
)
from tfindex.pipeline.structures import CRUDMethods, DataSourceMethods, SourceUnit
from tfindex.utils.constants import RESOURCE_RETURN_TYPES

CRUD_ALIASES = {
    "create_method": ("Create", "CreateContext", "CreateFunc", "CreateWithoutTimeout"),
    "read_method": ("Read", "ReadContext", "ReadFunc", "ReadWithoutTimeout"),
    "update_method": ("Update", "UpdateContext", "UpdateFunc", "UpdateWithoutTimeout"),
    "delete_method": ("Delete", "DeleteContext", "DeleteFunc", "DeleteWithoutTimeout"),
}

# Flattened key -> CRUDMethods field name
_FIELD_FOR_KEY = {alias: field for field, aliases in CRUD_ALIASES.items() for alias in aliases}


def find_function(units: Iterable[SourceUnit], name: str) -> FuncDecl | None:
    """Plain (receiver-less) function declared anywhere in the package."""
    for unit in units:
        for func in unit.functions:
            if func.name == name and not func.is_method:
                return func
    return None


def returns_resource(func: FuncDecl, resource_types: Iterable[str] = RESOURCE_RETURN_TYPES) -> bool:
    """True if the function returns exactly one pointer-to-resource type."""
    return len(func.result_types) == 1 and func.result_types[0] in set(resource_types)


def _address_literal(expr) -> CompositeLit | None:
    if isinstance(expr, Unary) and expr.op == "&" and isinstance(expr.operand, CompositeLit):
        return expr.operand
    return None


def _resource_literals(func: FuncDecl) -> list[CompositeLit]:
    """``return &Lit{}`` literals first, then ``x := &Lit{}`` literals."""
    literals = []
    for node in walk(func.body):
        if isinstance(node, Return):
            literals.extend(lit for lit in map(_address_literal, node.values) if lit is not None)

    for node in walk(func.body):
        if isinstance(node, Assign):
            literals.extend(lit for lit in map(_address_literal, node.values) if lit is not None)
    return literals


def _read_callbacks(literal: CompositeLit, fields: set[str]) -> dict[str, str]:
    found = {}
    for element in literal.elements:
        if not isinstance(element, KeyValue) or not isinstance(element.key, Ident):
            continue
        field = _FIELD_FOR_KEY.get(element.key.name)
        if field is None or field not in fields:
            continue
        name = callable_name(element.value)
        if name:
            found[field] = name
    return found


def _collect(func: FuncDecl, fields: set[str]) -> dict[str, str]:
    # Later literals overwrite earlier ones for the same operation
    collected: dict[str, str] = {}
    for literal in _resource_literals(func):
        collected.update(_read_callbacks(literal, fields))
    return collected


def extract_crud_methods(
    func: FuncDecl | None, resource_types: Iterable[str] = RESOURCE_RETURN_TYPES
) -> CRUDMethods | None:
    """CRUD callbacks of a resource function, or None when nothing is wired."""
    if func is None or func.body is None or not returns_resource(func, resource_types):
        return None

    methods = CRUDMethods(**_collect(func, set(CRUD_ALIASES)))
    return None if methods.is_empty() else methods


def extract_data_source_methods(
    func: FuncDecl | None, resource_types: Iterable[str] = RESOURCE_RETURN_TYPES
) -> DataSourceMethods | None:
    """Read callback of a data source function, or None when absent."""
    if func is None or func.body is None or not returns_resource(func, resource_types):
        return None

    methods = DataSourceMethods(**_collect(func, {"read_method"}))
    return None if methods.is_empty() else methods


def resolve_resource_crud_methods(
    units: list[SourceUnit],
    table: Mapping[str, str],
    resource_types: Iterable[str] = RESOURCE_RETURN_TYPES,
) -> dict[str, CRUDMethods]:
    """Terraform type -> CRUD callbacks for each legacy resource that resolves."""
    resolved = {}
    for terraform_type, registration_method in table.items():
        methods = extract_crud_methods(find_function(units, registration_method), resource_types)
        if methods is not None:
            resolved[terraform_type] = methods
    return resolved


def resolve_data_source_methods(
    units: list[SourceUnit],
    table: Mapping[str, str],
    resource_types: Iterable[str] = RESOURCE_RETURN_TYPES,
) -> dict[str, DataSourceMethods]:
    """Terraform type -> read callback for each legacy data source that resolves."""
    resolved = {}
    for terraform_type, registration_method in table.items():
        methods = extract_data_source_methods(find_function(units, registration_method), resource_types)
        if methods is not None:
            resolved[terraform_type] = methods
    return resolved
