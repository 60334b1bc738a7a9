"""NewsWave: top-headlines reader with a key-injecting proxy."""

__version__ = "0.1.0"
