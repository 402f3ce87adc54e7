"""DashFleet – synthetic fleet health derivations shared by the dashboard and API."""

__version__ = "0.1.0"
