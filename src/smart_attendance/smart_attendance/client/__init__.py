from .client import DataClient
from .errors import ApplicationError, ClientError, ConnectivityError

__all__ = ["DataClient", "ApplicationError", "ClientError", "ConnectivityError"]
