"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = "SEO Audit Engine"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Output caps
    TOP_ISSUES_LIMIT: int = int(os.getenv("TOP_ISSUES_LIMIT", "5"))
    INSIGHTS_LIMIT: int = int(os.getenv("INSIGHTS_LIMIT", "5"))
    RECOMMENDATIONS_LIMIT: int = int(os.getenv("RECOMMENDATIONS_LIMIT", "10"))

    # Crawl
    CRAWL_MAX_PAGES: int = int(os.getenv("CRAWL_MAX_PAGES", "20"))

    # CORS
    CORS_ORIGINS: List[str] = field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if o.strip()
        ]
    )

settings = Settings()
