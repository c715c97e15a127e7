"""Core domain layer: entities, exceptions, store interfaces and pure services."""
