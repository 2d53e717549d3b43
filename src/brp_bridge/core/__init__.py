"""Core data types and exceptions shared across the bridge."""
