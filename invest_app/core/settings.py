import os
from decimal import Decimal
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from .url_parser import parser

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "DIGITAL REAL ESTATE INVESTMENT PLATFORM"
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./invest.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_EXPIRE_MINUTES: int = 60

    RATE_LIMIT_REDIS_URL: str | None = os.getenv("RATE_LIMIT_REDIS_URL")
    RATE_LIMIT_TIMES: int = 20
    RATE_LIMIT_SECONDS: int = 10

    UPSTASH_REDIS_TOKEN: str | None = os.getenv("UPSTASH_REDIS_REST_TOKEN")
    UPSTASH_REDIS_URL: str | None = os.getenv("UPSTASH_REDIS_REST_URL")

    RABBITMQ_URL: str = os.getenv("RABBITMQ_URL", "")
    RABBITMQ_MAIN_EXCHANGE: str = "investment_events"
    RABBITMQ_DLX: str = "dead_letter_exchange"
    RABBITMQ_DLX_QUEUE: str = "dead_letter_queue"

    TRANSFER_MIN_HOLDING_DAYS: int = 90
    TRANSFER_MIN_PRICE_RATIO: Decimal = Decimal("0.8")
    CONTACT_MESSAGE_MIN_LENGTH: int = 20
    DEFAULT_OWNER_EMAIL: str = "admin@digitalassets.com"

    ALLOWED_HOSTS_RAW: str = os.getenv("ALLOWED_HOSTS", "")

    @property
    def ALLOWED_HOSTS(self) -> List[str]:
        return parser.parse_url_list(self.ALLOWED_HOSTS_RAW, "ALLOWED_HOSTS")

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


settings = Settings()
