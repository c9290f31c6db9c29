import re
import secrets
import string
import unicodedata
from dataclasses import dataclass, asdict
from typing import Iterable, List

from app.services.csv_parser_service import CSVRow

PASSWORD_SYMBOLS = "!@#$%^&*-_"
PASSWORD_ALPHABET = string.ascii_letters + string.digits + PASSWORD_SYMBOLS
MIN_PASSWORD_LENGTH = 8

_NON_LETTERS = re.compile(r"[^a-z\s]")


@dataclass(frozen=True)
class GeneratedUser:
    full_name: str
    postal_code: str
    birthday: str
    generated_email: str
    generated_password: str

    def to_dict(self) -> dict:
        return asdict(self)


def generate_email(name: str, domain: str = "company.com") -> str:
    """
    Builds the synthetic login email for a person.

    Accents are folded to ASCII, everything but letters is dropped and the
    remaining words are joined with dots:
    - "Jane Doe"        -> "jane.doe@company.com"
    - "  José  O'Neil " -> "jose.oneil@company.com"
    """
    folded = unicodedata.normalize("NFKD", name or "")
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    words = _NON_LETTERS.sub("", folded).split()
    local_part = ".".join(words) or "user"
    return f"{local_part}@{domain}"


def generate_password(length: int = 16) -> str:
    if length < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password length must be at least {MIN_PASSWORD_LENGTH}")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def generate_users(
    rows: Iterable[CSVRow],
    domain: str = "company.com",
    password_length: int = 16,
) -> List[GeneratedUser]:
    return [
        GeneratedUser(
            full_name=row.name,
            postal_code=row.postal_code,
            birthday=row.birthday,
            generated_email=generate_email(row.name, domain),
            generated_password=generate_password(password_length),
        )
        for row in rows
    ]
