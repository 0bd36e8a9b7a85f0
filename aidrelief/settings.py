from pydantic import BaseModel
import os

class Settings(BaseModel):
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "")
    GOOGLE_APPLICATION_CREDENTIALS: str = os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "")
    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    REQUESTS_COLLECTION: str = os.getenv("FIRESTORE_REQUESTS_COLLECTION", "requests")
    WAREHOUSES_COLLECTION: str = os.getenv("FIRESTORE_WAREHOUSES_COLLECTION", "warehouse")

    # Firestore calls are single attempts; this bounds each one.
    STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))
    GEOLOCATION_TIMEOUT_SECONDS: float = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "10"))

    DEFAULT_MAP_LAT: float = float(os.getenv("DEFAULT_MAP_LAT", "0"))
    DEFAULT_MAP_LNG: float = float(os.getenv("DEFAULT_MAP_LNG", "0"))

settings = Settings()
