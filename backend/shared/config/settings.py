"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Order core settings with defaults for development."""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Order identity
    order_id_prefix: str = "order"
    # Generated ids are re-rolled on collision, at most this many times
    order_id_max_attempts: int = 5

    # Human-facing order label: ORD-001, ORD-002, ...
    order_number_prefix: str = "ORD"
    order_number_width: int = 3

    # Status board (customer-facing screen). None shows every order.
    status_board_limit: int | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def format_order_number(self, order_number: int) -> str:
        """Render an order number as its display label."""
        return f"{self.order_number_prefix}-{order_number:0{self.order_number_width}d}"

    def validate_production_settings(self) -> list[str]:
        """
        Validate settings that must hold in production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

        if self.order_id_max_attempts < 1:
            errors.append("ORDER_ID_MAX_ATTEMPTS must be at least 1")

        if self.order_number_width < 1:
            errors.append("ORDER_NUMBER_WIDTH must be at least 1")

        if self.status_board_limit is not None and self.status_board_limit < 1:
            errors.append("STATUS_BOARD_LIMIT must be a positive number when set")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
