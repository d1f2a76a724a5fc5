"""Modbus register map decoding, poll planning and SQLite storage for central data logging."""

__version__ = "0.1.1"