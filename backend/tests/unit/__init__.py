"""Unit tests. No Redis server or model provider is needed."""
