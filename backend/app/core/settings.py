import os


class Settings:
    def __init__(self):
        self.app_name = "Billing Back-Office"
        self.api_version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.secret_key = os.getenv("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./billing.db")
        self.seed_on_startup = os.getenv("SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes")
        # Length of a pay-as-you-go bundle.
        self.bundle_validity_days = 30


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
