"""
Backup Package

Versioned export and import of a user's assets, expenses and savings.
"""

from .codec import EXPORT_VERSION, BackupCodec

__all__ = ["EXPORT_VERSION", "BackupCodec"]
