from leave_portal.store.state import AppState, Store
from leave_portal.store.persistence import StateRepository

__all__ = ["AppState", "Store", "StateRepository"]
