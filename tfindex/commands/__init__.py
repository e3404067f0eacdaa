"""CLI commands for tfindex."""
