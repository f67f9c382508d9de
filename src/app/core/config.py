import os

# In a real app, load from environment variables or a config file
SECRET_KEY: str = os.getenv(
    "SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!"
)
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./reports_console.sqlite3")

# Shown on the dashboard as the contact for operators
ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")

# Key under which the reporting service credentials live in the key-value store
CREDENTIALS_KEY: str = "credentials"

CORS_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Set to DEBUG to see the (redacted) payloads sent to the reporting service
REPORTS_LOG_LEVEL: str = os.getenv("REPORTS_LOG_LEVEL", LOG_LEVEL).upper()

TORTOISE_MODELS: list[str] = [
    "app.features.auth.models",
    "app.features.credentials.models",
]
