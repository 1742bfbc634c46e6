"""
Constants used throughout the garage door watcher
"""

# Polling
DEFAULT_CHECK_INTERVAL = "30s"
DEFAULT_MAX_RETRIES = 5
RETRY_BASE_DELAY = 1.0  # Seconds, doubles each retry
RETRY_MAX_DELAY = 30.0

# Decision thresholds
DEFAULT_CONFIDENCE_THRESHOLD = 75  # Percent
DEFAULT_NOTIFICATION_COOLDOWN = "10m"

# Frame storage
DEFAULT_IMAGE_PATH = "/Volumes/RAMDisk/last-shot.jpg"
DEFAULT_LOW_CONFIDENCE_DIR = "low-confidence"
DEFAULT_RAM_DISK_SIZE_MB = 2
RAM_DISK_SECTORS_PER_MB = 2048

# Local state broadcast
DEFAULT_BROADCAST_HOST = "127.0.0.1"
DEFAULT_BROADCAST_PORT = 8086

# Environment variables
ENV_MODEL_PATH = "MODEL_PATH"
ENV_RTSP_URL = "RTSP_URL"
ENV_CHECK_INTERVAL = "GARAGE_CHECK_INTERVAL"
ENV_CONFIDENCE_THRESHOLD = "CONFIDENCE_THRESHOLD"
ENV_GRACE_PERIOD = "GRACE_PERIOD"
ENV_NOTIFICATION_COOLDOWN = "NOTIFICATION_COOLDOWN"
ENV_MAX_RETRIES = "MAX_RETRIES"
ENV_IMAGE_PATH = "IMAGE_PATH"
ENV_RAM_DISK_SIZE = "RAM_DISK_SIZE"
ENV_LOW_CONFIDENCE_DIR = "LOW_CONFIDENCE_DIR"
ENV_PUSHOVER_TOKEN = "PUSHOVER_TOKEN"
ENV_PUSHOVER_USER = "PUSHOVER_USER"
ENV_NTFY_TOPIC = "NTFY_TOPIC"
ENV_BROADCAST_PORT = "BROADCAST_PORT"
