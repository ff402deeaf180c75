from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Client settings, read from the environment or a .env file."""

    # Backend
    API_BASE_URL: str = "http://localhost:5001/api"
    REQUEST_TIMEOUT: float = 30.0

    # Session
    TOKEN_FILE: str = "~/.rental_client/token"
    LOGIN_PATH: str = "/login"

    LOG_LEVEL: str = "INFO"

    # Matches the backend's multer limit for license and inquiry images
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()
