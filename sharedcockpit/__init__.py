"""Building blocks for sharing a flight simulator cockpit: variable encoding, gauge messaging, event mapping, sync definitions, settings and update checks."""

__version__ = "0.1.0"