"""Centralized exit codes for the tfindex CLI."""


class ExitCodes:
    """Standard exit codes for tfindex commands."""

    SUCCESS = 0

    SCAN_FAILED = 3
    WRITE_FAILED = 4

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - Index written",
            cls.SCAN_FAILED: "Services directory could not be scanned",
            cls.WRITE_FAILED: "Index files could not be written",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
