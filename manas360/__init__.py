"""MANAS360 - session lifecycle and live countdown engine for a telehealth portal."""

__version__ = "0.1.0"
