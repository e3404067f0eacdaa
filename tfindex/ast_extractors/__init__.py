"""Go syntax extraction - tree-sitter parsing lowered into typed nodes."""
