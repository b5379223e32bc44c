"""
Pipeline Configuration

Fixed API constants plus the tunables read from the environment. Credentials
are read once here and handed to the API client at construction time.
"""

from dataclasses import dataclass, field, replace
from urllib.parse import urlparse

from .env import env_get, env_int, env_float

# API Endpoints
STACKEXCHANGE_API_URL = "https://api.stackexchange.com/2.2"
TAGS_PATH = "/tags"

# Query defaults
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100
DEFAULT_ORDER = "desc"
DEFAULT_SORT = "popular"
DEFAULT_SITE = "stackoverflow"
REQUEST_TIMEOUT = 30.0

# Rate limiting and retries
REQUEST_DELAY = 3.0  # seconds between successful page fetches
MAX_ATTEMPTS = 10
RETRY_DELAY = 0.1
MAX_RETRY_DELAY = 30.0

# Output
DEFAULT_OUTPUT_PATH = "/tmp/stackoverflow_tags.csv"


def validate_base_url(url: str) -> str:
    """Return url without a trailing slash, or raise ValueError"""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"failed to parse url: {url!r}")
    return url.rstrip("/")


@dataclass(frozen=True)
class FetchConfig:
    """Query configuration for a single tags request"""

    base_url: str = STACKEXCHANGE_API_URL
    page_size: int = DEFAULT_PAGE_SIZE
    order: str = DEFAULT_ORDER
    sort: str = DEFAULT_SORT
    site: str = DEFAULT_SITE
    key: str = field(default="", repr=False)
    access_token: str = field(default="", repr=False)
    timeout: float = REQUEST_TIMEOUT

    def __post_init__(self):
        object.__setattr__(self, "base_url", validate_base_url(self.base_url))
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def tags_url(self) -> str:
        return self.base_url + TAGS_PATH

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """Build from ACCESS_TOKEN, KEY and the STACKEXCHANGE_* / TAGS_* variables"""
        return cls(
            base_url=env_get("STACKEXCHANGE_API_URL") or STACKEXCHANGE_API_URL,
            page_size=env_int("TAGS_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            key=env_get("KEY", "") or "",
            access_token=env_get("ACCESS_TOKEN", "") or "",
            timeout=env_float("REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        )


@dataclass(frozen=True)
class PaginationConfig:
    """Pacing and retry policy for the pagination driver"""

    request_delay: float = REQUEST_DELAY
    max_attempts: int = MAX_ATTEMPTS
    retry_delay: float = RETRY_DELAY
    max_retry_delay: float = MAX_RETRY_DELAY
    retry_decode_errors: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        for name in ("request_delay", "retry_delay", "max_retry_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    def backoff(self, attempt: int) -> float:
        """Wait after failed attempt number `attempt` (1-based)"""
        return min(self.retry_delay * 2 ** (attempt - 1), self.max_retry_delay)

    @classmethod
    def from_env(cls) -> "PaginationConfig":
        return cls(
            request_delay=env_float("REQUEST_DELAY", REQUEST_DELAY),
            max_attempts=env_int("MAX_ATTEMPTS", MAX_ATTEMPTS),
            retry_delay=env_float("RETRY_DELAY", RETRY_DELAY),
        )


@dataclass(frozen=True)
class PipelineConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    output_path: str = DEFAULT_OUTPUT_PATH

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        return cls(
            fetch=FetchConfig.from_env(),
            pagination=PaginationConfig.from_env(),
            output_path=env_get("TAGS_OUTPUT_PATH") or DEFAULT_OUTPUT_PATH,
        )

    def with_overrides(
        self,
        output_path: str | None = None,
        request_delay: float | None = None,
        max_attempts: int | None = None,
        page_size: int | None = None,
    ) -> "PipelineConfig":
        """Return a copy with CLI overrides applied (None means keep)"""
        fetch = self.fetch
        pagination = self.pagination
        if page_size is not None:
            fetch = replace(fetch, page_size=page_size)
        if request_delay is not None:
            pagination = replace(pagination, request_delay=request_delay)
        if max_attempts is not None:
            pagination = replace(pagination, max_attempts=max_attempts)
        return replace(
            self,
            fetch=fetch,
            pagination=pagination,
            output_path=output_path if output_path is not None else self.output_path,
        )
