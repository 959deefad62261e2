import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Supabase configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "http://127.0.0.1:54321")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

# OpenRouter configuration
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
OPENROUTER_TIMEOUT_SECONDS = float(os.getenv("OPENROUTER_TIMEOUT_SECONDS", "60"))
OPENROUTER_APP_TITLE = os.getenv("OPENROUTER_APP_TITLE", "10xCards")

# Auth cookie configuration
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "sb-127-auth-token")
AUTH_COOKIE_SECURE = os.getenv("AUTH_COOKIE_SECURE", "false").lower() == "true"

# Flashcard constraints
FRONT_MAX_LENGTH = 200
BACK_MAX_LENGTH = 500
MAX_FLASHCARDS_PER_REQUEST = 50
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

# Generation constraints
SOURCE_TEXT_MIN_LENGTH = 1000
SOURCE_TEXT_MAX_LENGTH = 10000

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# App configuration
APP_TITLE = "Fiszki API"
APP_VERSION = "1.0"
APP_DESCRIPTION = "FastAPI flashcards backend on top of Supabase"

# CORS origins
# Note: When allow_credentials=True, you cannot use wildcard "*" for origins
CORS_ORIGINS_ENV = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
# Add any additional origins from environment variable
if CORS_ORIGINS_ENV:
    CORS_ORIGINS.extend([origin.strip() for origin in CORS_ORIGINS_ENV.split(",")])

CORS_CREDENTIALS = True
CORS_METHODS = ["*"]
CORS_HEADERS = ["*"]
