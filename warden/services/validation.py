"""Input checks shared by registration and user administration."""

from warden.core.errors import ValidationError
from warden.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LEN} characters"
PASSWORD_TOO_LONG = f"Password must be at most {PASSWORD_MAX_LEN} characters"


def password_problem(password: str | None) -> str | None:
    """Return the message describing why password is unacceptable, or None."""
    if not password or len(password) < PASSWORD_MIN_LEN:
        return PASSWORD_TOO_SHORT
    if len(password) > PASSWORD_MAX_LEN:
        return PASSWORD_TOO_LONG
    return None


def validate_new_account(email: str | None, password: str | None) -> None:
    """Raise ValidationError listing every problem with a new account's credentials."""
    errors: dict[str, str] = {}
    if not email or not email.strip():
        errors["email"] = "Email is required"
    problem = password_problem(password)
    if problem:
        errors["password"] = problem
    if errors:
        raise ValidationError(errors)
