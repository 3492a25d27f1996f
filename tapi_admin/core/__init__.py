"""
TAPI Admin Core
===============

Core utilities shared by the console modules: configuration, durable
storage, logging, the HTTP client, request lifecycles and resource stores.
"""

from .api_client import ApiClient
from .config import Config
from .database import Database
from .lifecycle import RequestLifecycle, RequestState
from .logging_service import LoggingService, logger
from .resource_store import ResourceStore, resource_id
from .storage import TokenStorage

__all__ = [
    'ApiClient', 'Config', 'Database', 'LoggingService', 'logger',
    'RequestLifecycle', 'RequestState', 'ResourceStore', 'resource_id',
    'TokenStorage',
]
