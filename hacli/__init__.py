"""Client, output helpers and argparse commands for a Home Assistant system's Supervisor API."""

__version__ = "0.1.0"
__all__ = ["__version__"]