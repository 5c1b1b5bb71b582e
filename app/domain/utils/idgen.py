import secrets
import string

ROOM_NAME_ALPHABET = string.ascii_lowercase + string.digits


def random_token(length: int = 4) -> str:
    return "".join(secrets.choice(ROOM_NAME_ALPHABET) for _ in range(length))


def new_room_name() -> str:
    """Generate a shareable room name such as ``k3fz-0q9a``."""
    return f"{random_token()}-{random_token()}"
