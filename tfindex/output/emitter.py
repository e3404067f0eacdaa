"""Write a ProviderIndex out as one summary document plus one file per entity.

Layout::

    <output_dir>/<summary_file>
    <output_dir>/resources/<terraform_type>.json
    <output_dir>/datasources/<terraform_type>.json
    <output_dir>/ephemeral/<terraform_type>.json

Entity writes run on a thread pool. The first failed write cancels every task
that has not started yet and is raised as EmissionError; files already written
stay on disk.

A terraform type that is not a single safe file name is logged and skipped, so
no write lands outside its category directory.
"""

import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from tfindex.events import ProgressCallback
from tfindex.indexer.exceptions import EmissionError
from tfindex.pipeline.structures import PackageRegistration, ProviderIndex
from tfindex.progress import ProgressTracker
from tfindex.utils.constants import (
    DATASOURCES_SUBDIR,
    DEFAULT_SUMMARY_FILE,
    EPHEMERAL_SUBDIR,
    RESOURCES_SUBDIR,
)
from tfindex.utils.logging import phase_logger

from . import entities
from .storage import FileSystemStorage, Storage

EMIT_PHASE = "indexing"
SUMMARY_LABEL = "summary"

log = phase_logger(EMIT_PHASE)


class EntityKind(Enum):
    LEGACY_RESOURCE = "legacy_resource"
    MODERN_RESOURCE = "modern_resource"
    LEGACY_DATA_SOURCE = "legacy_data_source"
    MODERN_DATA_SOURCE = "modern_data_source"
    EPHEMERAL = "ephemeral"


@dataclass(frozen=True)
class OutputLayout:
    output_dir: str
    summary_file: str = DEFAULT_SUMMARY_FILE
    resources_dir: str = RESOURCES_SUBDIR
    datasources_dir: str = DATASOURCES_SUBDIR
    ephemeral_dir: str = EPHEMERAL_SUBDIR

    @classmethod
    def from_config(cls, output_dir: str, config: dict[str, Any]) -> "OutputLayout":
        output = config.get("output", {})
        return cls(
            output_dir=output_dir,
            summary_file=output.get("summary_file", DEFAULT_SUMMARY_FILE),
            resources_dir=output.get("resources_dir", RESOURCES_SUBDIR),
            datasources_dir=output.get("datasources_dir", DATASOURCES_SUBDIR),
            ephemeral_dir=output.get("ephemeral_dir", EPHEMERAL_SUBDIR),
        )

    def _join(self, *parts: str) -> str:
        return str(Path(self.output_dir, *parts))

    @property
    def summary_path(self) -> str:
        return self._join(self.summary_file)

    def directories(self) -> list[str]:
        return [
            self._join(),
            self._join(self.resources_dir),
            self._join(self.datasources_dir),
            self._join(self.ephemeral_dir),
        ]

    def resource_path(self, terraform_type: str) -> str:
        return self._join(self.resources_dir, f"{terraform_type}.json")

    def data_source_path(self, terraform_type: str) -> str:
        return self._join(self.datasources_dir, f"{terraform_type}.json")

    def ephemeral_path(self, terraform_type: str) -> str:
        return self._join(self.ephemeral_dir, f"{terraform_type}.json")


@dataclass(frozen=True)
class WriteTask:
    """One entity file to write. Built before dispatch, never mutated."""
    kind: EntityKind
    label: str
    path: str
    service: PackageRegistration
    name: str
    registration_method: str = ""

    def build(self) -> entities.ResourceRecord | entities.DataSourceRecord | entities.EphemeralRecord:
        if self.kind is EntityKind.LEGACY_RESOURCE:
            return entities.legacy_resource(self.service, self.name, self.registration_method)
        if self.kind is EntityKind.MODERN_RESOURCE:
            return entities.modern_resource(self.service, self.name)
        if self.kind is EntityKind.LEGACY_DATA_SOURCE:
            return entities.legacy_data_source(self.service, self.name, self.registration_method)
        if self.kind is EntityKind.MODERN_DATA_SOURCE:
            return entities.modern_data_source(self.service, self.name)
        return entities.ephemeral_resource(self.service, self.name)


@dataclass
class EmissionResult:
    files_written: int = 0
    paths: list[str] = field(default_factory=list)


def is_safe_entity_name(terraform_type: str) -> bool:
    """True when ``terraform_type`` can be used as a single file name.

    Identifiers come straight from Go string literals, so anything that could
    leave its category directory is refused.
    """
    if not terraform_type or terraform_type in (".", ".."):
        return False
    if "/" in terraform_type or "\\" in terraform_type or "\x00" in terraform_type:
        return False
    return ".." not in terraform_type


def build_tasks(index: ProviderIndex, layout: OutputLayout) -> list[WriteTask]:
    """Every entity write for the index, in service order.

    Entities whose terraform type is not a safe file name are logged and
    skipped.
    """
    tasks = []

    def add(kind, noun, terraform_type, path_for, service, name, method=""):
        if not is_safe_entity_name(terraform_type):
            log.bind(service=service.service_name).warning(
                f"Skipping {noun} {terraform_type!r}: not usable as a file name"
            )
            return
        tasks.append(WriteTask(
            kind=kind,
            label=f"{noun} {terraform_type}",
            path=path_for(terraform_type),
            service=service,
            name=name,
            registration_method=method,
        ))

    for service in index.services:
        for terraform_type, method in service.supported_resources.items():
            add(EntityKind.LEGACY_RESOURCE, "resource", terraform_type, layout.resource_path,
                service, terraform_type, method)

        for struct_type in service.resources:
            terraform_type = service.resource_terraform_types.get(struct_type, struct_type)
            add(EntityKind.MODERN_RESOURCE, "resource", terraform_type, layout.resource_path,
                service, struct_type)

        for terraform_type, method in service.supported_data_sources.items():
            add(EntityKind.LEGACY_DATA_SOURCE, "data source", terraform_type, layout.data_source_path,
                service, terraform_type, method)

        for struct_type in service.data_sources:
            terraform_type = service.data_source_terraform_types.get(struct_type, struct_type)
            add(EntityKind.MODERN_DATA_SOURCE, "data source", terraform_type, layout.data_source_path,
                service, struct_type)

        for func_name in service.ephemeral_resources:
            terraform_type = service.ephemeral_terraform_types.get(func_name, func_name)
            add(EntityKind.EPHEMERAL, "ephemeral", terraform_type, layout.ephemeral_path,
                service, func_name)
    return tasks


class IndexEmitter:
    """Runs the summary write and the entity write pool."""

    def __init__(self, layout: OutputLayout, storage: Storage | None = None, workers: int | None = None):
        self.layout = layout
        self.storage = storage if storage is not None else FileSystemStorage()
        self.workers = workers
        self._lock = threading.Lock()

    def _run_task(self, task: WriteTask, tracker: ProgressTracker, result: EmissionResult) -> None:
        self.storage.write_json(task.path, task.build().to_dict())
        with self._lock:
            result.files_written += 1
            result.paths.append(task.path)
        tracker.update(task.label)

    def emit(self, index: ProviderIndex, progress_callback: ProgressCallback | None = None) -> EmissionResult:
        tasks = build_tasks(index, self.layout)
        tracker = ProgressTracker(EMIT_PHASE, 1 + len(tasks), progress_callback)
        result = EmissionResult()

        try:
            for directory in self.layout.directories():
                self.storage.make_dirs(directory)
            self.storage.write_json(self.layout.summary_path, index.to_dict())
        except Exception as e:
            raise EmissionError(
                f"Failed to write index summary: {e}",
                {"path": self.layout.summary_path},
            ) from e

        result.files_written += 1
        result.paths.append(self.layout.summary_path)
        tracker.update(SUMMARY_LABEL)

        if tasks:
            self._run_pool(tasks, tracker, result)

        tracker.complete()
        log.info(f"Wrote {result.files_written} files to {self.layout.output_dir}")
        return result

    def _run_pool(self, tasks: list[WriteTask], tracker: ProgressTracker, result: EmissionResult) -> None:
        max_workers = min(self.workers or os.cpu_count() or 1, len(tasks))
        failed: tuple[WriteTask, Exception] | None = None

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self._run_task, task, tracker, result): task for task in tasks}
            for future in as_completed(futures):
                error = future.exception()
                if error is None:
                    continue
                failed = (futures[future], error)
                # In-flight writes finish; queued ones never start
                for pending in futures:
                    pending.cancel()
                break

        if failed is not None:
            task, error = failed
            log.error(f"Emission aborted at {task.label}: {error}")
            raise EmissionError(
                f"Failed to write {task.label}: {error}",
                {"path": task.path, "files_written": result.files_written, "tasks": len(tasks)},
            ) from error


def write_index(
    index: ProviderIndex,
    layout: OutputLayout,
    storage: Storage | None = None,
    progress_callback: ProgressCallback | None = None,
    workers: int | None = None,
) -> EmissionResult:
    """Emit the summary and every entity document for ``index``."""
    return IndexEmitter(layout, storage=storage, workers=workers).emit(index, progress_callback)
