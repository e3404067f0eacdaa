"""Index emission: entity documents, storage backends and the writer pool."""
