"""Referee system serial protocol, checksums, payload decoding and client UI drawing."""

__version__ = "0.1.0"