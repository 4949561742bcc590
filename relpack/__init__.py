"""Release packager for Windows client and server builds."""

__version__ = "0.1.0"
