"""tfindex - Terraform provider registration indexer."""

__version__ = "0.3.0"
