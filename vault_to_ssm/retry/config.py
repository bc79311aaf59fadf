"""Retry configuration settings."""

from dataclasses import dataclass


@dataclass
class RetryConfiguration:
    """Configuration for retry behavior with exponential backoff.

    Attributes:
        max_attempts: Maximum number of attempts, first call included (default: 3)
        base_delay: Initial delay in seconds between attempts (default: 0.5)
        max_delay: Maximum delay cap in seconds (default: 10.0)
        exponential_base: Base for exponential backoff multiplier (default: 2.0)
        jitter: Upper bound of random jitter added to each delay (default: 0.5)
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.max_delay < self.base_delay:
            raise ValueError(
                f"max_delay must be >= base_delay, got {self.max_delay} < {self.base_delay}"
            )
        if self.exponential_base < 1:
            raise ValueError(f"exponential_base must be >= 1, got {self.exponential_base}")
        if self.jitter < 0:
            raise ValueError(f"jitter must be >= 0, got {self.jitter}")

    @classmethod
    def no_retry(cls) -> "RetryConfiguration":
        """Configuration that performs a single attempt."""
        return cls(max_attempts=1, base_delay=0.0, max_delay=0.0, jitter=0.0)
