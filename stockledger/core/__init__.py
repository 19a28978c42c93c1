"""Core domain layer: entities, interfaces, exceptions and pure services."""
