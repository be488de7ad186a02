# organic_store/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CouponRule(BaseModel):
    """
    A single discount rule from the coupon table.

    - type="percent" => `discount` is a percentage of the subtotal
    - type="fixed"   => `discount` is a flat amount
    """

    discount: float = Field(ge=0)
    type: Literal["fixed", "percent"]
    description: str = ""


DEFAULT_COUPONS: dict[str, CouponRule] = {
    "FIRST50": CouponRule(discount=50, type="fixed", description="First time user"),
    "SAVE100": CouponRule(
        discount=100, type="fixed", description="₹100 off on orders over ₹500"
    ),
    "ORGANIC20": CouponRule(
        discount=20, type="percent", description="20% off organic products"
    ),
    "WELCOME10": CouponRule(
        discount=10, type="percent", description="10% welcome discount"
    ),
}


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres or SQLite connection string)
      - JWT_SECRET (HS256 signing secret for access tokens)

    Optional:
      - ENVIRONMENT ("development" | "production"); production hides
        internal error details from API responses
      - COUPONS as a JSON object, e.g.
        {"SPRING5": {"discount": 5, "type": "percent", "description": "..."}}
    """

    PROJECT_NAME: str = "Organic Food API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str

    # JWT issuing / verification
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Orders
    ESTIMATED_DELIVERY_DAYS: int = 3

    # `organic-store` console script
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    COUPONS: dict[str, CouponRule] = Field(
        default_factory=lambda: dict(DEFAULT_COUPONS)
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
