"""
Quote of the day.
"""
import random
from typing import NamedTuple, Optional, Sequence


class Quote(NamedTuple):
    text: str
    author: str


QUOTES = (
    Quote("It is better to be alone than in bad company.", "George Washington"),
    Quote("The only true wisdom is in knowing you know nothing.", "Socrates"),
    Quote("Life is like riding a bicycle. To keep your balance, you must keep moving.", "Albert Einstein"),
    Quote("I have a dream.", "Martin Luther King Jr."),
    Quote("Whatever you are, be a good one.", "Abraham Lincoln"),
    Quote("Success is not final, failure is not fatal: it is the courage to continue that counts.", "Winston Churchill"),
    Quote("The future belongs to those who believe in the beauty of their dreams.", "Eleanor Roosevelt"),
    Quote("Injustice anywhere is a threat to justice everywhere.", "Martin Luther King Jr."),
    Quote("Do not pray for easy lives. Pray to be stronger men.", "John F. Kennedy"),
)


def pick_random(quotes: Sequence[Quote] = QUOTES, seed: Optional[int] = None) -> Quote:
    """
    Pick one quote uniformly at random.

    Args:
        quotes: Quotes to choose from, must not be empty
        seed: Fixes the choice when given

    Returns:
        The chosen Quote
    """
    if not quotes:
        raise ValueError("No quotes to choose from")
    return random.Random(seed).choice(list(quotes))


# Quote shown for the lifetime of the process
_session_quote: Optional[Quote] = None


def get_session_quote() -> Quote:
    """Get the quote for this session, picking one on first use."""
    global _session_quote
    if _session_quote is None:
        _session_quote = pick_random()
    return _session_quote
