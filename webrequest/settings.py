import os
from typing import Optional

from dotenv import load_dotenv

from webrequest import __version__

# Load .env file variables into environment
load_dotenv(verbose=True)


class Settings:
    """Client configuration settings loaded from environment variables."""

    # --- Transport Defaults ---
    DEFAULT_TIMEOUT: float = 30.0
    MAX_REDIRECTS: int = 32
    USER_AGENT: str = f"webrequest/{__version__}"

    # --- Transport Getters using os.getenv ---
    def get_default_timeout(self) -> float:
        """Returns the transport timeout (seconds) used when a request sets none."""
        value = os.getenv("WEBREQUEST_DEFAULT_TIMEOUT")
        if value is None:
            return self.DEFAULT_TIMEOUT
        try:
            timeout = float(value)
        except ValueError:
            raise ValueError("WEBREQUEST_DEFAULT_TIMEOUT environment variable must be a number.")
        if timeout <= 0:
            raise ValueError("WEBREQUEST_DEFAULT_TIMEOUT environment variable must be positive.")
        return timeout

    def get_max_redirects(self) -> int:
        """Returns the maximum number of redirects the transport follows."""
        try:
            return int(os.getenv("WEBREQUEST_MAX_REDIRECTS", str(self.MAX_REDIRECTS)))
        except ValueError:
            raise ValueError("WEBREQUEST_MAX_REDIRECTS environment variable must be an integer.")

    def get_user_agent(self) -> str:
        return os.getenv("WEBREQUEST_USER_AGENT", self.USER_AGENT)

    def get_proxy_url(self) -> Optional[str]:
        """Returns the proxy URL for outbound requests, if set."""
        return os.getenv("WEBREQUEST_PROXY") or None

    # --- Logging Settings ---
    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()
