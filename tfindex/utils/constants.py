"""Centralized constants for tfindex.

This module provides a single source of truth for paths, directory names,
and SDK tags used across the scanner and the emitter.
"""

from pathlib import Path

# ============================================================================
# WORKING DIRECTORIES
# ============================================================================

# Per-project directory for tfindex config and logs
TFINDEX_DIR = Path("./.tfindex")

# Log files
ERROR_LOG_FILE = TFINDEX_DIR / "error.log"

# Config file name inside TFINDEX_DIR
CONFIG_FILE_NAME = "config.json"

# ============================================================================
# OUTPUT LAYOUT
# ============================================================================

DEFAULT_OUTPUT_DIR = "./index"
DEFAULT_SUMMARY_FILE = "terraform-provider-index.json"
RESOURCES_SUBDIR = "resources"
DATASOURCES_SUBDIR = "datasources"
EPHEMERAL_SUBDIR = "ephemeral"

# ============================================================================
# SDK TAGS
# ============================================================================

SDK_LEGACY = "legacy_pluginsdk"
SDK_MODERN = "modern_sdk"
SDK_EPHEMERAL = "ephemeral"

CATEGORY_LEGACY = "legacy"
CATEGORY_MODERN = "modern"
CATEGORY_EPHEMERAL = "ephemeral"

# Return types accepted for legacy resource and data source functions
RESOURCE_RETURN_TYPES = ("*pluginsdk.Resource", "*schema.Resource")

# Marker files
GO_MOD_FILE = "go.mod"
GO_SOURCE_SUFFIX = ".go"
GO_TEST_SUFFIX = "_test.go"
