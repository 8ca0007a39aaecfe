"""Infrastructure layer: store backends, password hashing and the query layer."""
