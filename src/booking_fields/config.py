"""Configuration loader for Booking User Fields with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization and passed to services
config = {
    "database_url": os.getenv("DATABASE_URL", "sqlite:///./booking_fields.db"),
    "redis_url": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    "port": int(os.getenv("PORT", "8080")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    # Option under which the global field list is stored
    "user_fields_option_name": os.getenv(
        "USER_FIELDS_OPTION_NAME", "codobookings_user_fields"
    ),
    # Sliding expiry for in-progress editor sessions
    "editor_ttl_seconds": int(os.getenv("EDITOR_TTL_SECONDS", "1800")),
    "jwt_secret_key": os.getenv("JWT_SECRET_KEY"),
    "admin_api_key": os.getenv("ADMIN_API_KEY"),
    "environment": os.getenv("ENVIRONMENT"),
}
