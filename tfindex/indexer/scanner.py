"""Scan a provider's services directory into a ProviderIndex.

Each immediate subdirectory is one service package. Packages are scanned in
parallel; a package that cannot be loaded is logged and skipped, and a package
with no registrations is dropped.
"""

import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from tfindex.events import ProgressCallback
from tfindex.pipeline.structures import PackageRegistration, ProviderIndex, ScanState, Statistics
from tfindex.progress import ProgressTracker
from tfindex.utils.constants import GO_MOD_FILE, RESOURCE_RETURN_TYPES
from tfindex.utils.logging import phase_logger

from .aggregator import aggregate_package
from .exceptions import PackageLoadError
from .provider import GoPackageProvider

SCAN_PHASE = "scanning"

log = phase_logger(SCAN_PHASE)


def find_module_root(path: Path) -> Path | None:
    """Nearest directory at or above ``path`` that holds a go.mod."""
    path = path.resolve()
    for candidate in (path, *path.parents):
        if (candidate / GO_MOD_FILE).is_file():
            return candidate
    return None


def service_package_path(base_package_path: str, services_dir: Path, service_name: str) -> str:
    """Import path of a service package.

    The services directory is taken relative to its Go module root, falling back
    to the working directory when there is no go.mod above it.
    """
    services_dir = services_dir.resolve()
    anchor = find_module_root(services_dir) or Path.cwd().resolve()
    try:
        relative = services_dir.relative_to(anchor).as_posix()
    except ValueError:
        relative = ""

    parts = [base_package_path.rstrip("/")]
    if relative and relative != ".":
        parts.append(relative)
    parts.append(service_name)
    return "/".join(part for part in parts if part)


def list_service_dirs(services_dir: Path) -> list[Path]:
    """Immediate subdirectories, sorted by name; plain files are ignored."""
    try:
        return sorted((p for p in services_dir.iterdir() if p.is_dir()), key=lambda p: p.name)
    except OSError as e:
        raise PackageLoadError(
            f"Failed to read services directory {services_dir}: {e}",
            {"directory": str(services_dir)},
        ) from e


class ProviderScanner:
    """Fans service packages out over a thread pool and collects the results."""

    def __init__(
        self,
        provider: GoPackageProvider | None = None,
        workers: int | None = None,
        resource_types: Iterable[str] = RESOURCE_RETURN_TYPES,
    ):
        self.provider = provider or GoPackageProvider()
        self.workers = workers
        self.resource_types = tuple(resource_types)
        self.state = ScanState.IDLE
        self.skipped: list[str] = []

    def _set_state(self, state: ScanState) -> None:
        self.state = state
        log.debug(f"Scan state -> {state.value}")

    def _scan_one(
        self, service_dir: Path, package_path: str, tracker: ProgressTracker
    ) -> PackageRegistration | None:
        """Worker body. Always reports progress exactly once."""
        name = service_dir.name
        package_log = log.bind(service=name)
        try:
            units = self.provider.load_package(service_dir)
            if not units:
                package_log.debug("No Go files")
                return None
            reg = aggregate_package(units, name, package_path, self.resource_types)
        except PackageLoadError as e:
            package_log.warning(f"Skipping package: {e}")
            self.skipped.append(name)
            return None
        except Exception as e:
            package_log.opt(exception=True).warning(f"Skipping package: unexpected error {e}")
            self.skipped.append(name)
            return None
        finally:
            tracker.update(name)

        if reg.is_empty():
            package_log.debug("No registrations")
            return None
        package_log.debug(
            f"Registered {len(reg.supported_resources) + len(reg.resources)} resources, "
            f"{len(reg.supported_data_sources) + len(reg.data_sources)} data sources, "
            f"{len(reg.ephemeral_resources)} ephemeral resources"
        )
        return reg

    def scan(
        self,
        services_dir: str | Path,
        base_package_path: str,
        version: str,
        progress_callback: ProgressCallback | None = None,
    ) -> ProviderIndex:
        services_dir = Path(services_dir)
        self.skipped = []
        self._set_state(ScanState.IDLE)

        service_dirs = list_service_dirs(services_dir)
        if not service_dirs:
            log.info(f"No service packages found under {services_dir}")
            self._set_state(ScanState.BUILT)
            return ProviderIndex(version=version)

        tracker = ProgressTracker(SCAN_PHASE, len(service_dirs), progress_callback)
        max_workers = min(self.workers or os.cpu_count() or 1, len(service_dirs))

        self._set_state(ScanState.DISTRIBUTING)
        log.debug(f"Scanning {len(service_dirs)} packages with {max_workers} workers")

        registrations: list[PackageRegistration] = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(
                    self._scan_one,
                    service_dir,
                    service_package_path(base_package_path, services_dir, service_dir.name),
                    tracker,
                )
                for service_dir in service_dirs
            ]
            self._set_state(ScanState.WORKING)

            for future in as_completed(futures):
                reg = future.result()
                if reg is not None:
                    registrations.append(reg)

        self._set_state(ScanState.COLLECTING)
        statistics = Statistics.from_registrations(registrations)
        tracker.complete()

        index = ProviderIndex(version=version, services=tuple(registrations), statistics=statistics)
        self._set_state(ScanState.BUILT)

        log.info(
            f"Scanned {len(service_dirs)} packages: {statistics.service_count} services, "
            f"{statistics.total_resources} resources, {statistics.total_data_sources} data sources"
            + (f", {len(self.skipped)} skipped" if self.skipped else "")
        )
        return index


def scan_provider(
    services_dir: str | Path,
    base_package_path: str,
    version: str,
    progress_callback: ProgressCallback | None = None,
    workers: int | None = None,
    provider: GoPackageProvider | None = None,
    resource_types: Iterable[str] = RESOURCE_RETURN_TYPES,
) -> ProviderIndex:
    """Scan every service package under ``services_dir``."""
    scanner = ProviderScanner(provider=provider, workers=workers, resource_types=resource_types)
    return scanner.scan(services_dir, base_package_path, version, progress_callback)
