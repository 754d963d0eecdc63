"""Remote progress service access."""

from korkort.remote.connectivity import ConnectivityChecker
from korkort.remote.progress_client import ProgressClient, RemoteServiceError

__all__ = [
    "ConnectivityChecker",
    "ProgressClient",
    "RemoteServiceError",
]
