from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "TradeBitcoin"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./tradebitcoin.db"

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    REGISTER_RATE_LIMIT: str = "3/hour"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
