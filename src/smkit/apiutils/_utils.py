import random
import string
import time

from ..session import Session


def suffix() -> str:
    """Generate a time-stamped suffix with 4 random letters, e.g. ``2021-03-01-120000-AbCd``."""
    alph = string.ascii_letters
    return "{}-{}".format(time.strftime("%Y-%m-%d-%H%M%S", time.gmtime()), "".join(random.sample(alph, 4)))


def name(prefix: str) -> str:
    """Generate a new name with the specified prefix."""
    return f"{prefix}-{suffix()}"


def default_session() -> Session:
    """Create a default session."""
    return Session()
