"""Per-entity documents derived from a PackageRegistration.

Index references point at symbols in a Go symbol index:
``func.<name>.goindex`` for package functions and
``method.<Type>.<Method>.goindex`` for methods.
"""

from dataclasses import asdict, dataclass
from typing import Any

from tfindex.pipeline.structures import PackageRegistration
from tfindex.utils.constants import (
    CATEGORY_EPHEMERAL,
    CATEGORY_LEGACY,
    CATEGORY_MODERN,
    SDK_EPHEMERAL,
    SDK_LEGACY,
    SDK_MODERN,
)

EPHEMERAL_REGISTRATION_METHOD = "EphemeralResources"

# Always serialized, even when empty
_IDENTITY_FIELDS = ("terraform_type", "struct_type", "namespace", "registration_method", "sdk_type", "category")


def func_index(name: str) -> str:
    return f"func.{name}.goindex" if name else ""


def method_index(type_name: str, method: str) -> str:
    return f"method.{type_name}.{method}.goindex"


@dataclass(frozen=True)
class _Record:
    terraform_type: str
    struct_type: str
    namespace: str
    registration_method: str
    sdk_type: str
    category: str

    def to_dict(self) -> dict[str, Any]:
        """Identity fields always; index references only when set."""
        return {
            key: value
            for key, value in asdict(self).items()
            if key in _IDENTITY_FIELDS or value
        }


@dataclass(frozen=True)
class ResourceRecord(_Record):
    schema_index: str = ""
    create_index: str = ""
    read_index: str = ""
    update_index: str = ""
    delete_index: str = ""
    attribute_index: str = ""


@dataclass(frozen=True)
class DataSourceRecord(_Record):
    schema_index: str = ""
    read_index: str = ""
    attribute_index: str = ""


@dataclass(frozen=True)
class EphemeralRecord(_Record):
    schema_index: str = ""
    open_index: str = ""
    renew_index: str = ""
    close_index: str = ""


def legacy_resource(reg: PackageRegistration, terraform_type: str, registration_method: str) -> ResourceRecord:
    crud = reg.resource_crud_methods.get(terraform_type)
    return ResourceRecord(
        terraform_type=terraform_type,
        struct_type="",
        namespace=reg.package_path,
        registration_method=registration_method,
        sdk_type=SDK_LEGACY,
        category=CATEGORY_LEGACY,
        schema_index=func_index(registration_method),
        create_index=func_index(crud.create_method) if crud else "",
        read_index=func_index(crud.read_method) if crud else "",
        update_index=func_index(crud.update_method) if crud else "",
        delete_index=func_index(crud.delete_method) if crud else "",
        attribute_index=func_index(registration_method),
    )


def modern_resource(reg: PackageRegistration, struct_type: str) -> ResourceRecord:
    """Falls back to the struct name when no Terraform type was resolved."""
    return ResourceRecord(
        terraform_type=reg.resource_terraform_types.get(struct_type, struct_type),
        struct_type=struct_type,
        namespace=reg.package_path,
        registration_method="",
        sdk_type=SDK_MODERN,
        category=CATEGORY_MODERN,
        schema_index=method_index(struct_type, "Arguments"),
        create_index=method_index(struct_type, "Create"),
        read_index=method_index(struct_type, "Read"),
        update_index=method_index(struct_type, "Update"),
        delete_index=method_index(struct_type, "Delete"),
        attribute_index=method_index(struct_type, "Attributes"),
    )


def legacy_data_source(reg: PackageRegistration, terraform_type: str, registration_method: str) -> DataSourceRecord:
    methods = reg.data_source_methods.get(terraform_type)
    return DataSourceRecord(
        terraform_type=terraform_type,
        struct_type="",
        namespace=reg.package_path,
        registration_method=registration_method,
        sdk_type=SDK_LEGACY,
        category=CATEGORY_LEGACY,
        schema_index=func_index(registration_method),
        read_index=func_index(methods.read_method) if methods else "",
        attribute_index=func_index(registration_method),
    )


def modern_data_source(reg: PackageRegistration, struct_type: str) -> DataSourceRecord:
    return DataSourceRecord(
        terraform_type=reg.data_source_terraform_types.get(struct_type, struct_type),
        struct_type=struct_type,
        namespace=reg.package_path,
        registration_method="",
        sdk_type=SDK_MODERN,
        category=CATEGORY_MODERN,
        schema_index=method_index(struct_type, "Arguments"),
        read_index=method_index(struct_type, "Read"),
        attribute_index=method_index(struct_type, "Attributes"),
    )


def ephemeral_resource(reg: PackageRegistration, func_name: str) -> EphemeralRecord:
    return EphemeralRecord(
        terraform_type=reg.ephemeral_terraform_types.get(func_name, func_name),
        struct_type=func_name,
        namespace=reg.package_path,
        registration_method=EPHEMERAL_REGISTRATION_METHOD,
        sdk_type=SDK_EPHEMERAL,
        category=CATEGORY_EPHEMERAL,
        schema_index=method_index(func_name, "Schema"),
        open_index=method_index(func_name, "Open"),
        renew_index=method_index(func_name, "Renew"),
        close_index=method_index(func_name, "Close"),
    )
