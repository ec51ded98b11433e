from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "GameWatch"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"

    # Upstream APIs
    SLEEPER_API_BASE: str = "https://api.sleeper.app/v1"
    ESPN_CORE_API_BASE: str = (
        "https://sports.core.api.espn.com/v2/sports/football/leagues/nfl"
    )
    HTTP_TIMEOUT_SECONDS: float = 10.0
    PLAYERS_HTTP_TIMEOUT_SECONDS: float = 30.0

    # Player directory cache
    PLAYERS_CACHE_TTL_SECONDS: int = 3600

    # Week probing
    MATCHUP_WEEK_LOOKAHEAD: int = 5
    SCHEDULE_WEEK_ATTEMPTS: int = 5
    SCHEDULE_WINDOW_PAST_DAYS: int = 7
    SCHEDULE_WINDOW_FUTURE_DAYS: int = 28
    REGULAR_SEASON_WEEKS: int = 18

    # Request bounds
    MAX_GAMES_PER_REQUEST: int = 5

    # Frontend URLs for CORS (can be set via environment variables)
    FRONTEND_URL: Optional[str] = None
    ALLOWED_ORIGINS: Optional[str] = None  # Comma-separated list

    def get_frontend_urls(self) -> List[str]:
        """Get frontend URLs based on environment and configuration"""
        urls = []

        if self.ALLOWED_ORIGINS:
            urls.extend([url.strip() for url in self.ALLOWED_ORIGINS.split(",")])

        if self.ENVIRONMENT in ("production", "staging"):
            if self.FRONTEND_URL:
                urls.append(self.FRONTEND_URL)
        else:  # development
            urls.extend(
                [
                    "http://localhost:3000",
                    "http://localhost:5173",
                    "http://127.0.0.1:3000",
                    "http://127.0.0.1:5173",
                ]
            )

        # Remove duplicates while preserving order
        return list(dict.fromkeys(urls))

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
