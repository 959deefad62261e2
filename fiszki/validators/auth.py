"""
Auth form validation.

Each validator returns a Polish error message when the value is invalid
and None when it passes. They never raise.
"""
import re
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ERROR_MESSAGES = {
    # Authentication errors
    "invalid_credentials": "Nieprawidłowy email lub hasło",
    "invalid_grant": "Nieprawidłowy email lub hasło",
    # Registration errors
    "email_exists": "Użytkownik z tym adresem email już istnieje",
    "user_already_exists": "Użytkownik z tym adresem email już istnieje",
    # Password errors
    "weak_password": "Hasło jest za słabe. Użyj minimum 6 znaków",
    "invalid_email": "Nieprawidłowy format adresu email",
    "user_not_found": "Nie znaleziono użytkownika z tym adresem email",
    "email_not_confirmed": "Email nie został potwierdzony. Sprawdź swoją skrzynkę pocztową",
    # Rate limiting
    "over_email_send_rate_limit": "Wysłano zbyt wiele emaili. Spróbuj ponownie później",
    "too_many_requests": "Zbyt wiele prób. Spróbuj ponownie później",
    # Network/Server errors
    "network_error": "Błąd połączenia. Sprawdź połączenie z internetem",
    "server_error": "Błąd serwera. Spróbuj ponownie później",
}

DEFAULT_ERROR_MESSAGE = "Wystąpił błąd. Spróbuj ponownie później"

STATUS_MESSAGES = {
    400: "Nieprawidłowe dane. Sprawdź formularz i spróbuj ponownie",
    401: "Nieprawidłowy email lub hasło",
    403: "Brak dostępu. Sprawdź swoje uprawnienia",
    429: ERROR_MESSAGES["too_many_requests"],
    500: ERROR_MESSAGES["server_error"],
    502: ERROR_MESSAGES["server_error"],
    503: ERROR_MESSAGES["server_error"],
}


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email or not email.strip():
        return "Email jest wymagany"

    if not EMAIL_PATTERN.match(email):
        return "Nieprawidłowy format email"

    return None


def validate_password(password: Optional[str], min_length: int = 6) -> Optional[str]:
    if not password:
        return "Hasło jest wymagane"

    if len(password) < min_length:
        return f"Hasło musi mieć minimum {min_length} znaków"

    return None


def validate_password_match(password: Optional[str], confirm_password: Optional[str]) -> Optional[str]:
    if not confirm_password:
        return "Powtórz hasło"

    if password != confirm_password:
        return "Hasła nie są identyczne"

    return None


def map_auth_error(error: Any) -> str:
    """Translate a Supabase auth failure into a user-facing Polish message"""
    if error is None:
        return DEFAULT_ERROR_MESSAGE

    message = str(getattr(error, "message", "") or "").lower()
    if "invalid login credentials" in message or "invalid credentials" in message:
        return ERROR_MESSAGES["invalid_credentials"]
    if "already registered" in message or "already exists" in message:
        return ERROR_MESSAGES["email_exists"]
    if "weak password" in message:
        return ERROR_MESSAGES["weak_password"]
    for code, text in ERROR_MESSAGES.items():
        if code.replace("_", " ") in message:
            return text

    code = getattr(error, "code", None)
    if code and code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]

    status = getattr(error, "status", None)
    if status:
        return STATUS_MESSAGES.get(status, DEFAULT_ERROR_MESSAGE)

    return DEFAULT_ERROR_MESSAGE
