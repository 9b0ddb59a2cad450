"""licenseplist: collect third-party licenses into a Settings.bundle plist."""

__version__ = "0.1.0"
