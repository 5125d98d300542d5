"""
Configuration for the Bakery Orders service.

Settings are read from environment variables; a local ``.env`` file is loaded
first so development setups do not need to export anything.
"""
import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


class Settings:
    """Service settings, resolved from the environment at construction time."""

    def __init__(self):
        self.PORT: int = int(os.getenv("PORT", "5000"))
        self.DB_HOST: str = os.getenv("DB_HOST", "localhost")
        self.DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
        self.DB_USER: str = os.getenv("DB_USER", "root")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_NAME: str = os.getenv("DB_NAME", "sweet_crust_bakery")
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_POOL_TIMEOUT: float = float(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.CORS_ORIGINS: list = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self._database_url = os.getenv("DATABASE_URL")

    def _url(self, database=None) -> URL:
        return URL.create(
            drivername="mysql+pymysql",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=database,
        )

    @property
    def server_url(self) -> str:
        """URL of the database server without a database selected."""
        return self._url().render_as_string(hide_password=False)

    @property
    def database_url(self) -> str:
        """
        URL the service connects to.

        ``DATABASE_URL`` wins when set; otherwise the URL is assembled from the
        individual ``DB_*`` variables.
        """
        if self._database_url:
            return self._database_url
        return self._url(self.DB_NAME).render_as_string(hide_password=False)


def get_settings() -> Settings:
    return Settings()
