"""Store lifecycle, credential hashing and the error taxonomy."""
