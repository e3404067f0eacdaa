"""Resolve modern implementation objects to their Terraform type names.

Two lifecycle methods carry the type name:

    func (r FooResource) ResourceType() string { return "azurerm_foo" }

    func (d *FooDataSource) Metadata(_ context.Context, _ Req, resp *Resp) {
        resp.TypeName = "azurerm_foo"
    }

Receivers match on the underlying type whether declared by value or pointer.
"""

from collections.abc import Iterable

from tfindex.ast_extractors.go_nodes import Assign, FuncDecl, Return, Selector, StringLit, walk
from tfindex.extractors.registration import literal_type_of, returned_literals
from tfindex.pipeline.structures import SourceUnit
from tfindex.utils.logging import logger

RESOURCE_TYPE_METHOD = "ResourceType"
METADATA_METHOD = "Metadata"
TYPE_NAME_FIELD = "TypeName"


def _methods_of(units: Iterable[SourceUnit], type_name: str, method_name: str) -> list[FuncDecl]:
    return [
        func
        for unit in units
        for func in unit.functions
        if func.name == method_name and func.receiver_type == type_name
    ]


def _direct_return(func: FuncDecl) -> str | None:
    """First non-empty ``return "lit"`` in the body."""
    for node in walk(func.body):
        if not isinstance(node, Return) or not node.values:
            continue
        value = node.values[0]
        if isinstance(value, StringLit) and value.value:
            return value.value
    return None


def _field_assignment(func: FuncDecl) -> str | None:
    for node in walk(func.body):
        if not isinstance(node, Assign):
            continue
        for target, value in zip(node.targets, node.values):
            if not isinstance(target, Selector) or target.field != TYPE_NAME_FIELD:
                continue
            if isinstance(value, StringLit) and value.value:
                return value.value
    return None


def resolve_terraform_type(units: list[SourceUnit], type_name: str) -> str | None:
    """Terraform type exposed by ``type_name``, or None when it cannot be found."""
    for func in _methods_of(units, type_name, RESOURCE_TYPE_METHOD):
        resolved = _direct_return(func)
        if resolved:
            return resolved

    for func in _methods_of(units, type_name, METADATA_METHOD):
        resolved = _field_assignment(func)
        if resolved:
            return resolved

    return None


def _constructed_type(units: list[SourceUnit], func_name: str) -> str | None:
    """Type built by a constructor such as ``func NewFoo() ephemeral.EphemeralResource { return &Foo{} }``."""
    for unit in units:
        for func in unit.functions:
            if func.name != func_name or func.is_method:
                continue
            for literal in returned_literals(func):
                type_name = literal_type_of(literal)
                if type_name:
                    return type_name
    return None


def resolve_ephemeral_type(units: list[SourceUnit], func_name: str) -> str | None:
    """Terraform type for an ephemeral resource registered by constructor name."""
    resolved = resolve_terraform_type(units, func_name)
    if resolved:
        return resolved

    type_name = _constructed_type(units, func_name)
    if type_name is None:
        return None
    return resolve_terraform_type(units, type_name)


def resolve_terraform_types(units: list[SourceUnit], names: Iterable[str], ephemeral: bool = False) -> dict[str, str]:
    """Map every resolvable name to its Terraform type; misses are left out."""
    resolver = resolve_ephemeral_type if ephemeral else resolve_terraform_type
    resolved = {}
    for name in names:
        terraform_type = resolver(units, name)
        if terraform_type is None:
            logger.debug(f"No terraform type found for {name}")
            continue
        resolved[name] = terraform_type
    return resolved
