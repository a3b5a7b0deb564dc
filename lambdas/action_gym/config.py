import os

# Global configuration and feature flags
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG_LOGGING = os.getenv("DEBUG_LOGGING", "false").lower() == "true"
FEATURE_S3_DATA = os.getenv("FEATURE_S3_DATA", "false").lower() == "true"
S3_SCHEDULE_KEY = os.getenv("S3_SCHEDULE_KEY", "data/schedule.json")
SCHEDULE_FILE = os.getenv(
    "SCHEDULE_FILE",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "schedule.json"),
)
GYM_TIMEZONE = os.getenv("GYM_TIMEZONE", "UTC")
SESSION_CONTEXT_LIFESPAN = int(os.getenv("SESSION_CONTEXT_LIFESPAN", "99"))

# Resource names
S3_BUCKET_DATA = os.getenv("S3_BUCKET_DATA", "")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
