from pydantic_settings import BaseSettings
from dotenv import load_dotenv, find_dotenv
from os import getenv
from typing import List, Optional

_env_path = find_dotenv()  # locate a .env file in this folder or parent folders
if _env_path:
    load_dotenv(_env_path)


class Settings(BaseSettings):
    # Upstream evaluation service
    EVALUATION_BASE_URL: str = getenv('EVALUATION_BASE_URL', 'http://20.244.56.144/evaluation-service')
    # Bearer token is provisioned outside this service; requests go out unauthenticated when unset.
    EVALUATION_API_TOKEN: Optional[str] = getenv('EVALUATION_API_TOKEN')

    # Numbers service
    WINDOW_SIZE: int = int(getenv('WINDOW_SIZE', '10'))
    NUMBERS_TIMEOUT: float = float(getenv('NUMBERS_TIMEOUT', '1.0'))

    # Analytics service
    ANALYTICS_TIMEOUT: float = float(getenv('ANALYTICS_TIMEOUT', '5.0'))
    CACHE_TTL_SECONDS: float = float(getenv('CACHE_TTL_SECONDS', '300'))
    TOP_USERS_LIMIT: int = int(getenv('TOP_USERS_LIMIT', '5'))
    LATEST_POSTS_LIMIT: int = int(getenv('LATEST_POSTS_LIMIT', '5'))
    ANALYTICS_MAX_WORKERS: int = int(getenv('ANALYTICS_MAX_WORKERS', '8'))
    CORS_ORIGINS: str = getenv('CORS_ORIGINS', '*')

    LOG_LEVEL: str = getenv('LOG_LEVEL', 'DEBUG')

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(',') if o.strip()]

settings = Settings()
