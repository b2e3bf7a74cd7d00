from typing import Tuple
from app.utils.exceptions import ValidationError


MIN_RATING = 1
MAX_RATING = 5


def fold_rating(average: float, count: int, rating: float) -> Tuple[float, int]:
    """
    Fold one rating into a running (average, count) pair.
    new_average = (average * count + rating) / (count + 1)
    """
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError(
            "Validation errors",
            field_errors=[{"field": "rating", "message": f"Rating must be between {MIN_RATING} and {MAX_RATING}"}],
        )
    average = average or 0.0
    count = count or 0
    new_count = count + 1
    return (average * count + rating) / new_count, new_count
