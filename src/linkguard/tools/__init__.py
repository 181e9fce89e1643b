"""I/O-bound checks used by the analyzers."""
