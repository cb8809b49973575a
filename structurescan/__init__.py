"""StructureScan: building surface damage assessment from photos."""

__version__ = "0.1.0"
