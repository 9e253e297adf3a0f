"""TinyTools: static host and build tooling for a catalog of small browser tools."""
