"""Simplified SM-2 review scheduling."""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1
DEFAULT_EASE = 2.5
MIN_INTERVAL = 1
# Keeps next_review well inside the datetime range
MAX_INTERVAL = 36500
MIN_EASE = 1.3

AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
HARD_INTERVAL_FACTOR = 1.2
EASY_INTERVAL_BONUS = 1.3
EASY_EASE_BONUS = 0.15


class InvalidDifficultyError(ValueError):
    """Raised when a rating is not one of again/hard/good/easy."""


class Difficulty(Enum):
    """How hard the card was to recall, from forgotten (AGAIN) to effortless (EASY)."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        """Accept a Difficulty or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidDifficultyError(
            f"Unknown difficulty {value!r}; expected one of: "
            + ", ".join(d.value for d in cls)
        )


@dataclass(frozen=True)
class ReviewResult:
    interval: int
    ease: float
    next_review: datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to already be in UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _check_number(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


def _whole_days(days: float) -> int:
    if days >= MAX_INTERVAL:
        return MAX_INTERVAL
    return max(MIN_INTERVAL, math.floor(days))


def compute_next_review(
    difficulty: Difficulty | str,
    current_interval: int | None = DEFAULT_INTERVAL,
    current_ease: float | None = DEFAULT_EASE,
    now: datetime | None = None,
) -> ReviewResult:
    """Calculate the next review for a card.

    Args:
        difficulty: Difficulty, or one of "again", "hard", "good", "easy".
        current_interval: Days since the previous review was scheduled
            (None for a card that was never reviewed).
        current_ease: Current ease factor (None for a card that was never
            reviewed). Values below 1.3 are read as 1.3.
        now: Instant of this review. Defaults to the current UTC time.

    Returns:
        ReviewResult with the new interval, ease and next_review = now + interval days.
        The interval is kept between 1 and MAX_INTERVAL days.

    Raises:
        InvalidDifficultyError: difficulty is not one of the four ratings.
        TypeError: interval or ease is not a number.
        ValueError: interval or ease is infinite or NaN, or now is so close to
            datetime.max that the next review cannot be represented.
    """
    rating = Difficulty.parse(difficulty)

    if current_interval is None:
        current_interval = DEFAULT_INTERVAL
    if current_ease is None:
        current_ease = DEFAULT_EASE
    _check_number("current_interval", current_interval)
    _check_number("current_ease", current_ease)

    # Clamp stored state back into range rather than propagating it
    interval = _whole_days(current_interval)
    ease = max(MIN_EASE, float(current_ease))

    if rating is Difficulty.AGAIN:
        new_interval = 1
        new_ease = max(MIN_EASE, ease - AGAIN_EASE_PENALTY)
    elif rating is Difficulty.HARD:
        new_interval = _whole_days(interval * HARD_INTERVAL_FACTOR)
        new_ease = max(MIN_EASE, ease - HARD_EASE_PENALTY)
    elif rating is Difficulty.GOOD:
        new_interval = _whole_days(interval * ease)
        new_ease = ease
    else:
        new_interval = _whole_days(interval * ease * EASY_INTERVAL_BONUS)
        # Ease has no upper bound
        new_ease = ease + EASY_EASE_BONUS

    reviewed_at = utc_now() if now is None else as_utc(now)
    try:
        next_review = reviewed_at + timedelta(days=new_interval)
    except OverflowError as e:
        raise ValueError(
            f"next review {new_interval} days after {reviewed_at:%Y-%m-%d} is past year 9999"
        ) from e

    logger.debug(
        "%s: interval %d -> %d, ease %.2f -> %.2f",
        rating.value, interval, new_interval, ease, new_ease,
    )
    return ReviewResult(interval=new_interval, ease=new_ease, next_review=next_review)
