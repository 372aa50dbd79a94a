"""Vault risk inspection and what-if simulation for ether.fi Cash safes."""

__version__ = "0.1.0"
