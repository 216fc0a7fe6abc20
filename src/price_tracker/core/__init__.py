"""Tracker state, backend client and workflows."""

from .add_product import AddProductWorkflow, AddState
from .client import BackendClient
from .config import Settings, get_settings, load_settings
from .errors import (
    ConfigurationError,
    ErrorCode,
    ErrorSlot,
    NetworkError,
    StateError,
    TrackerError,
    ValidationError,
)
from .filters import FilterState
from .models import PricePoint, Product, ProductFilter
from .recheck import RecheckCoordinator, RecheckState
from .state import TrackerApp
from .store import ProductStore

__all__ = [
    "AddProductWorkflow",
    "AddState",
    "BackendClient",
    "ConfigurationError",
    "ErrorCode",
    "ErrorSlot",
    "FilterState",
    "NetworkError",
    "PricePoint",
    "Product",
    "ProductFilter",
    "ProductStore",
    "RecheckCoordinator",
    "RecheckState",
    "Settings",
    "StateError",
    "TrackerApp",
    "TrackerError",
    "ValidationError",
    "get_settings",
    "load_settings",
]
