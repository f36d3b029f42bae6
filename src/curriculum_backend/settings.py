import os
import threading

_DEFAULT_ROLES_FILE = os.path.join(os.path.dirname(__file__), "data", "system-roles.yaml")


def _database_url_from_env() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    postgres_url = os.environ.get("POSTGRES_URL")
    if postgres_url:
        user = os.environ.get("POSTGRES_USER")
        password = os.environ.get("POSTGRES_PASSWORD")
        db = os.environ.get("POSTGRES_DB")
        return f"postgresql://{user}:{password}@{postgres_url}/{db}"

    return "sqlite:///./curriculum.db"


class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.DATABASE_URL = _database_url_from_env()
        self.TOKEN_SECRET = os.environ.get("TOKEN_SECRET", None)
        self.SYSTEM_ROLES_FILE = os.environ.get("SYSTEM_ROLES_FILE", _DEFAULT_ROLES_FILE)
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").lower()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
