"""
Connect server integration.
"""

from connect_secrets.integration.connect_client import ConnectClient

__all__ = ["ConnectClient"]
