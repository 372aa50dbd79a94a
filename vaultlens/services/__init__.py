"""Service modules"""
from .inspector import VaultInspector

__all__ = ["VaultInspector"]
