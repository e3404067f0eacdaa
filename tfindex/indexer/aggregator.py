"""Merge per-file registration findings into one package record."""

from collections.abc import Iterable

from tfindex.extractors import crud_resolver, registration, type_resolver
from tfindex.pipeline.structures import PackageRegistration, SourceUnit
from tfindex.utils.constants import RESOURCE_RETURN_TYPES


def aggregate_package(
    units: list[SourceUnit],
    service_name: str,
    package_path: str,
    resource_types: Iterable[str] = RESOURCE_RETURN_TYPES,
) -> PackageRegistration:
    """Run every recognizer over every file, then resolve types and callbacks.

    Files are merged in the order given. Mappings are last-write-wins per key,
    lists are concatenated. The caller decides what to do with an empty record.
    """
    reg = PackageRegistration(service_name=service_name, package_path=package_path)

    for unit in units:
        reg.supported_resources.update(registration.extract_supported_resources(unit))
        reg.supported_data_sources.update(registration.extract_supported_data_sources(unit))
        reg.resources.extend(registration.extract_resources(unit))
        reg.data_sources.extend(registration.extract_data_sources(unit))
        reg.ephemeral_resources.extend(registration.extract_ephemeral_resources(unit))

    if reg.is_empty():
        return reg

    reg.resource_terraform_types = type_resolver.resolve_terraform_types(units, reg.resources)
    reg.data_source_terraform_types = type_resolver.resolve_terraform_types(units, reg.data_sources)
    reg.ephemeral_terraform_types = type_resolver.resolve_terraform_types(
        units, reg.ephemeral_resources, ephemeral=True
    )

    resource_types = tuple(resource_types)
    reg.resource_crud_methods = crud_resolver.resolve_resource_crud_methods(
        units, reg.supported_resources, resource_types
    )
    reg.data_source_methods = crud_resolver.resolve_data_source_methods(
        units, reg.supported_data_sources, resource_types
    )
    return reg
