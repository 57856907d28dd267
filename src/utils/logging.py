"""Logging utilities for the application."""

import logging
import os
import sys

# Import OpenTelemetry components for Azure Monitor
from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry.instrumentation.logging import LoggingInstrumentor

logging_level = getattr(logging, os.environ.get("LOGGING_LEVEL", "INFO").upper(), logging.INFO)

# Application logger shared by the API, the store and the sync client
logger = logging.getLogger("convsync")
logger.setLevel(logging_level)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(logging.Formatter("%(asctime)s | PID:%(process)d | %(name)s | %(levelname)s | %(message)s"))
logger.addHandler(console_handler)

# Quiet noisy libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("pymongo").setLevel(logging.WARNING)

# Export to Azure Monitor only when a connection string is configured
appinsights_connection_string = os.environ.get("APPLICATIONINSIGHTS_CONNECTION_STRING")
if appinsights_connection_string:
    configure_azure_monitor(connection_string=appinsights_connection_string)
    LoggingInstrumentor().instrument(level=logging_level, excluded_loggers=["azure"])  # Avoid recursive logging

# Prevent propagation to root logger to avoid duplicate logs
logger.propagate = False
