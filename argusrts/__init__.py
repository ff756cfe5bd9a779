"""Entity-component core for a real-time strategy game: component registry, entities, timers, a k-d tree, and a component registry code generator."""

__version__ = "0.1.0"