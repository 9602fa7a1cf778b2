"""Output handlers. Each module exposes a ``Handler`` class."""
