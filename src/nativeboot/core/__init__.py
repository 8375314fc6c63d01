"""Core primitives shared across nativeboot: logging, errors and models."""
