"""Domain layer: immutable value objects with self-validating invariants."""
