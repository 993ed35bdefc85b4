import secrets
import string

SPECIAL_CHARS = "!@#$%^&*"


def generate_temporary_password(length: int = 12) -> str:
    """Random password with at least one upper, lower, digit and symbol.

    Handed out when a tenant admin is created without an explicit password.
    """
    length = max(length, 8)
    pools = [string.ascii_uppercase, string.ascii_lowercase, string.digits, SPECIAL_CHARS]

    chars = [secrets.choice(pool) for pool in pools]
    everything = "".join(pools)
    chars += [secrets.choice(everything) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)

    return "".join(chars)
