"""Client configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Client configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(api_base_url="https://chat.example.com", max_redirects=5)
    """

    # Navigation
    max_redirects: int = 10
    hook_timeout: float | None = None  # Seconds; None lets a hung hook stay pending
    history_size: int = 50

    # Auth redirects
    login_path: str = "/login"
    home_path: str = "/teams"

    # Data source
    api_base_url: str = ""
    request_timeout: float = 10.0
    current_user_url: str = "/api/users/{user_id}"  # Loaded by AuthState.load_current_user

    # Notifications
    notification_ttl_ms: int = 3000
    notification_enter_ms: int = 150
    notification_feed_size: int = 256

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            msg = f"max_redirects must be >= 0, got {self.max_redirects}"
            raise ConfigurationError(msg)
        if self.hook_timeout is not None and self.hook_timeout <= 0:
            msg = f"hook_timeout must be positive or None, got {self.hook_timeout}"
            raise ConfigurationError(msg)
        if self.notification_ttl_ms <= 0:
            msg = f"notification_ttl_ms must be positive, got {self.notification_ttl_ms}"
            raise ConfigurationError(msg)
        if not 0 <= self.notification_enter_ms <= self.notification_ttl_ms:
            msg = (
                "notification_enter_ms must be between 0 and notification_ttl_ms, "
                f"got {self.notification_enter_ms}"
            )
            raise ConfigurationError(msg)
        for name in ("login_path", "home_path"):
            value = getattr(self, name)
            if not value.startswith("/"):
                msg = f"{name} must be an absolute path, got {value!r}"
                raise ConfigurationError(msg)
