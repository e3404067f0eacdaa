"""Data contracts and console presentation for scan and emission."""
