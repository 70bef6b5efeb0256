import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./riskauth.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    # Peers allowed to set X-Forwarded-For / X-Real-IP (addresses or CIDRs)
    TRUSTED_PROXIES = data.get("TRUSTED_PROXIES", ["127.0.0.1", "::1"])

    # Counters (rate limits, IP blacklist)
    COUNTER_BACKEND = data.get("COUNTER_BACKEND", "memory")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")

    # Login policy
    VELOCITY_LIMIT = int(data.get("VELOCITY_LIMIT", 5))
    VELOCITY_WINDOW_SECONDS = int(data.get("VELOCITY_WINDOW_SECONDS", 3600))
    IP_BLACKLIST_SECONDS = int(data.get("IP_BLACKLIST_SECONDS", 3600))
    FAILED_LOGIN_LOCK_MINUTES = int(data.get("FAILED_LOGIN_LOCK_MINUTES", 30))
    HIGH_RISK_LOCK_MINUTES = int(data.get("HIGH_RISK_LOCK_MINUTES", 60))
    RISK_TIMEZONE = data.get("RISK_TIMEZONE", "UTC")
    LOCATION_MATCH_RADIUS_KM = data.get("LOCATION_MATCH_RADIUS_KM")

    # Step-up challenge
    OTP_LENGTH = int(data.get("OTP_LENGTH", 6))
    OTP_TTL_SECONDS = int(data.get("OTP_TTL_SECONDS", 600))
    OTP_MAX_ATTEMPTS = int(data.get("OTP_MAX_ATTEMPTS", 3))

    # Geolocation (ipinfo.io compatible)
    GEOLOCATION_URL = data.get("GEOLOCATION_URL", "https://ipinfo.io")
    GEOLOCATION_TOKEN = data.get("GEOLOCATION_TOKEN", "")
    GEOLOCATION_TIMEOUT_SECONDS = float(data.get("GEOLOCATION_TIMEOUT_SECONDS", 3.0))

    # Notifications
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "log")
    EMAIL_API_URL = data.get("EMAIL_API_URL", "https://api.brevo.com/v3/smtp/email")
    EMAIL_API_KEY = data.get("EMAIL_API_KEY", "")
    EMAIL_SENDER = data.get("EMAIL_SENDER", "security@example.com")
    NOTIFY_MAX_RETRIES = int(data.get("NOTIFY_MAX_RETRIES", 3))
    NOTIFY_RETRY_DELAY_SECONDS = float(data.get("NOTIFY_RETRY_DELAY_SECONDS", 1.0))

    # Sessions / admin
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = int(data.get("JWT_EXPIRE_MINUTES", 60))
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
