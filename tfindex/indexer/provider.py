"""Syntax provider: turns a package directory into parsed source units."""

from pathlib import Path

from tfindex.ast_extractors.go_impl import parse_go_source
from tfindex.pipeline.structures import SourceUnit
from tfindex.utils.constants import GO_SOURCE_SUFFIX, GO_TEST_SUFFIX
from tfindex.utils.logging import logger

from .exceptions import PackageLoadError


class GoPackageProvider:
    """Parses every Go file of one package directory (non-recursive)."""

    def __init__(self, include_tests: bool = False):
        self.include_tests = include_tests

    def source_files(self, directory: Path) -> list[Path]:
        """Go files in the directory, sorted by name for a stable merge order."""
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise PackageLoadError(
                f"Cannot list package directory {directory}: {e}",
                {"directory": str(directory)},
            ) from e

        files = []
        for path in entries:
            if not path.is_file() or path.suffix != GO_SOURCE_SUFFIX:
                continue
            if not self.include_tests and path.name.endswith(GO_TEST_SUFFIX):
                continue
            files.append(path)
        return files

    def load_package(self, directory: str | Path) -> list[SourceUnit]:
        """Parse the package; raises PackageLoadError if any file is unreadable."""
        directory = Path(directory)
        units = []
        for path in self.source_files(directory):
            try:
                content = path.read_bytes()
                content.decode("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise PackageLoadError(
                    f"Cannot read {path}: {e}",
                    {"directory": str(directory), "file": str(path)},
                ) from e

            tree = parse_go_source(content)
            units.append(SourceUnit(path=str(path), tree=tree, functions=tree.functions))

        logger.debug(f"Parsed {len(units)} Go files in {directory}")
        return units
