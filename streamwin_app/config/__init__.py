"""Configuration defaults, loading and validation for the allocator."""
