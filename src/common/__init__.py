"""Shared building blocks: config, logging, errors, types, filtering, pagination."""
