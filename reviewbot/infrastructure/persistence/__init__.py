from .database import UPDATABLE_SETTINGS, Database, init_database

__all__ = ["Database", "UPDATABLE_SETTINGS", "init_database"]
