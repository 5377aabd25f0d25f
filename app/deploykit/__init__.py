"""deploykit - configuration and package ordering for vendor software deployments."""

__version__ = "0.1.0"
