"""questcraft: authoring core for quest content (model, mutations, exports)."""

__version__ = "0.1.0"
