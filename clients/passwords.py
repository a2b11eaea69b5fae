# clients/passwords.py
import secrets
import string

SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

CHARACTER_CLASSES = (
    string.ascii_uppercase,
    string.ascii_lowercase,
    string.digits,
    SYMBOLS,
)


def generate_password(length: int = 12) -> str:
    """
    Temporary password for a newly onboarded client.

    Uses the `secrets` CSPRNG and always contains at least one upper-case
    letter, one lower-case letter, one digit and one symbol.
    """
    if length < len(CHARACTER_CLASSES):
        raise ValueError(f"Password length must be at least {len(CHARACTER_CLASSES)}")

    alphabet = "".join(CHARACTER_CLASSES)
    chars = [secrets.choice(group) for group in CHARACTER_CLASSES]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]

    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
