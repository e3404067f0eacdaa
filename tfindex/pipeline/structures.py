"""Data contracts for scanning and emission."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from tfindex.ast_extractors.go_nodes import FuncDecl, SourceFile


class ScanState(Enum):
    """Lifecycle of a provider scan."""
    IDLE = "idle"
    DISTRIBUTING = "distributing"
    WORKING = "working"
    COLLECTING = "collecting"
    BUILT = "built"


@dataclass(frozen=True)
class SourceUnit:
    """One parsed Go file and the functions it declares."""
    path: str
    tree: SourceFile
    functions: list[FuncDecl]


@dataclass
class CRUDMethods:
    """Lifecycle callbacks wired into a legacy resource definition."""
    create_method: str = ""
    read_method: str = ""
    update_method: str = ""
    delete_method: str = ""

    def is_empty(self) -> bool:
        return not (self.create_method or self.read_method or self.update_method or self.delete_method)

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value}


@dataclass
class DataSourceMethods:
    """Read callback wired into a legacy data source definition."""
    read_method: str = ""

    def is_empty(self) -> bool:
        return not self.read_method

    def to_dict(self) -> dict[str, str]:
        return {"read_method": self.read_method} if self.read_method else {}


@dataclass
class PackageRegistration:
    """Everything found in one service package.

    Owned by the worker scanning that package; never shared between threads.
    """
    service_name: str
    package_path: str
    supported_resources: dict[str, str] = field(default_factory=dict)
    supported_data_sources: dict[str, str] = field(default_factory=dict)
    resources: list[str] = field(default_factory=list)
    data_sources: list[str] = field(default_factory=list)
    ephemeral_resources: list[str] = field(default_factory=list)
    resource_crud_methods: dict[str, CRUDMethods] = field(default_factory=dict)
    data_source_methods: dict[str, DataSourceMethods] = field(default_factory=dict)
    resource_terraform_types: dict[str, str] = field(default_factory=dict)
    data_source_terraform_types: dict[str, str] = field(default_factory=dict)
    ephemeral_terraform_types: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """True when none of the five registration shapes matched."""
        return not (
            self.supported_resources
            or self.supported_data_sources
            or self.resources
            or self.data_sources
            or self.ephemeral_resources
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_name": self.service_name,
            "package_path": self.package_path,
            "supported_resources": dict(self.supported_resources),
            "supported_data_sources": dict(self.supported_data_sources),
            "resources": list(self.resources),
            "data_sources": list(self.data_sources),
            "ephemeral_resources": list(self.ephemeral_resources),
            "resource_crud_methods": {k: v.to_dict() for k, v in self.resource_crud_methods.items()},
            "data_source_methods": {k: v.to_dict() for k, v in self.data_source_methods.items()},
            "resource_terraform_types": dict(self.resource_terraform_types),
            "data_source_terraform_types": dict(self.data_source_terraform_types),
            "ephemeral_terraform_types": dict(self.ephemeral_terraform_types),
        }


@dataclass(frozen=True)
class Statistics:
    """Summary counts for a provider index."""
    service_count: int = 0
    total_resources: int = 0
    total_data_sources: int = 0
    legacy_resources: int = 0
    modern_resources: int = 0
    ephemeral_resources: int = 0

    @classmethod
    def from_registrations(cls, registrations: list[PackageRegistration]) -> "Statistics":
        legacy = sum(len(r.supported_resources) for r in registrations)
        modern = sum(len(r.resources) for r in registrations)
        ephemeral = sum(len(r.ephemeral_resources) for r in registrations)
        data_sources = sum(len(r.supported_data_sources) + len(r.data_sources) for r in registrations)
        return cls(
            service_count=len(registrations),
            total_resources=legacy + modern + ephemeral,
            total_data_sources=data_sources,
            legacy_resources=legacy,
            modern_resources=modern,
            ephemeral_resources=ephemeral,
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class ProviderIndex:
    """Whole-run result. Built once after every scan worker has finished."""
    version: str
    services: tuple[PackageRegistration, ...] = ()
    statistics: Statistics = field(default_factory=Statistics)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "version": self.version,
            "services": [service.to_dict() for service in self.services],
            "statistics": self.statistics.to_dict(),
        }


@dataclass(frozen=True)
class ProgressInfo:
    """One progress event."""
    phase: str
    current: str
    completed: int
    total: int
    percentage: float
    start_time: float
    timestamp: float

    @property
    def elapsed(self) -> float:
        """Seconds between tracker start and this event."""
        return max(0.0, self.timestamp - self.start_time)
