"""plugin-serve — developer commands for serving a built WebAssembly plugin."""

__version__ = "0.1.0"
