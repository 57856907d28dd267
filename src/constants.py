"""Constants for the application."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# MongoDB settings
DATABASE_CONNECTION_STRING = os.environ.get("MONGODB_URI")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "llmchat")

# API settings
API_PREFIX = os.environ.get("API_PREFIX", "/api")

# Sync client settings
SYNC_API_URL = os.environ.get("SYNC_API_URL", "http://localhost:8000")
SYNC_EXECUTION_CONTEXT = os.environ.get("SYNC_EXECUTION_CONTEXT", "server")
SYNC_TIMEOUT_SECONDS = float(os.environ.get("SYNC_TIMEOUT_SECONDS", "10"))
