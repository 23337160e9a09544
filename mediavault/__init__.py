"""MediaVault - classification de repertoires media et cache d'assets."""

__version__ = "0.1.0"
