"""
core/ranks.py -- The 0-5 privilege scale.

A domain rule, not an API contract: auth/, local/ and console/ all validate
ranks against these constants.
"""

MIN_RANK = 0
MAX_RANK = 5

# Minimum rank allowed to ban or unban another account.
MODERATOR_RANK = 1

RANK_NAMES = {
    0: "Member",
    1: "Admin",
    2: "Co-Owner",
    3: "Owner",
    4: "Tester",
    5: "Developer",
}


def is_valid_rank(value) -> bool:
    """Return True if value is an int (not a bool) inside [MIN_RANK, MAX_RANK]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_RANK <= value <= MAX_RANK


def rank_name(rank: int) -> str:
    return RANK_NAMES.get(rank, f"Rank {rank}")
