"""tokenvest core modules."""
