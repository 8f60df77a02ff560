"""
onsystem — OS/architecture conditional blocks for package manifests.
"""

__version__ = "0.1.0"
