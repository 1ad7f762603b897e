"""API identifiers, version ordering, dependent resource tracking, request routing and policy helpers."""

__version__ = "0.1.0"