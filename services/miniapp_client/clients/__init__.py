"""Mini program client transports.

Contains the cloud hosting gateway client and the cloud storage uploader.
"""

from services.miniapp_client.clients.cloud_uploader import CloudStorageUploader
from services.miniapp_client.clients.gateway_client import GatewayClient

__all__ = ["GatewayClient", "CloudStorageUploader"]
