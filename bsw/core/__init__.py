"""Core types shared by every layer: results, errors, config, domain model."""
