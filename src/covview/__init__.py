"""covview — render Istanbul HTML coverage reports as tables and annotated source."""

__version__ = "0.1.0"
