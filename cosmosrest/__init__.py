"""
CosmosREST: SDK-free Azure Cosmos DB REST client

Signs requests with the account master key and exposes document CRUD and
query operations over httpx.
"""

__version__ = "0.1.0"

from .cosmosdb.client import CosmosClient
from .core.config_manager import CosmosConfig, resolve_config

__all__ = ["CosmosClient", "CosmosConfig", "resolve_config", "__version__"]
