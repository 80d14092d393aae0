"""
trackpad-relay: drive the host cursor from a companion device on the local network.
"""

__version__ = "0.1.0"
