"""Password input bounds and advisory strength scoring."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal

from qrseal.errors import InvalidPassword

MIN_PASSWORD_LENGTH = 1
MAX_PASSWORD_LENGTH = 20
RECOMMENDED_PASSWORD_LENGTH = 12

StrengthLevel = Literal["weak", "fair", "good", "strong"]

# Checked case-insensitively.
_COMMON_PASSWORDS: frozenset[str] = frozenset(
    {
        "password", "password1", "password123", "123456", "12345678", "123456789",
        "1234567890", "qwerty", "qwerty123", "qwertyuiop", "abc123", "iloveyou",
        "admin", "letmein", "welcome", "monkey", "dragon", "master", "sunshine",
        "princess", "shadow", "superman", "football", "baseball", "trustno1",
        "passw0rd", "111111", "000000", "123123", "1q2w3e4r", "zxcvbnm",
        "asdfghjkl", "hunter2", "starwars", "secret", "qrcode",
    }
)

_SEQUENCES = re.compile(r"(012|123|234|345|456|567|678|789|890|abc|bcd|cde|def|efg|xyz|qwe|asd)")


@dataclass(frozen=True)
class PasswordStrength:
    score: int  # 0-100
    level: StrengthLevel
    feedback: list[str]
    entropy_bits: float

    @property
    def is_weak(self) -> bool:
        return self.level == "weak"


def check_password_length(password: str) -> None:
    """Raise :class:`InvalidPassword` unless the password has 1-20 characters."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidPassword("Password must not be empty")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise InvalidPassword(f"Password must be at most {MAX_PASSWORD_LENGTH} characters")


def estimate_entropy(password: str) -> float:
    """Estimate password entropy in bits based on character-set size."""
    charset_size = 0
    if re.search(r"[a-z]", password):
        charset_size += 26
    if re.search(r"[A-Z]", password):
        charset_size += 26
    if re.search(r"[0-9]", password):
        charset_size += 10
    if re.search(r"[^a-zA-Z0-9]", password):
        charset_size += 32

    if charset_size == 0:
        return 0.0
    return len(password) * math.log2(charset_size)


def evaluate_password(password: str) -> PasswordStrength:
    """Score a password. The result is advice only; nothing is rejected here."""
    feedback: list[str] = []

    if len(password) < RECOMMENDED_PASSWORD_LENGTH:
        feedback.append(f"Use at least {RECOMMENDED_PASSWORD_LENGTH} characters")

    classes = sum(
        bool(re.search(pattern, password))
        for pattern in (r"[a-z]", r"[A-Z]", r"[0-9]", r"[^a-zA-Z0-9]")
    )
    if classes < 2:
        feedback.append("Mix uppercase, lowercase, digits and symbols")

    repeated = bool(re.match(r"^(.)\1+$", password))
    if repeated:
        feedback.append("Do not repeat a single character")

    if _SEQUENCES.search(password.lower()):
        feedback.append("Avoid sequential characters (e.g. 123, abc)")

    common = password.lower() in _COMMON_PASSWORDS
    if common:
        feedback.append("This password is extremely common")

    entropy = estimate_entropy(password)

    # The 20-character cap leaves little room, so length is weighted heavily.
    score = min(40, len(password) * 3)
    score += min(25, classes * 7)
    score += min(25, int(entropy / 4))
    if len(password) >= RECOMMENDED_PASSWORD_LENGTH:
        score += 10
    if common:
        score = min(score, 15)
    if repeated:
        score = min(score, 5)
    score = min(100, max(0, score))

    if score < 35:
        level: StrengthLevel = "weak"
    elif score < 60:
        level = "fair"
    elif score < 80:
        level = "good"
    else:
        level = "strong"

    return PasswordStrength(score=score, level=level, feedback=feedback, entropy_bits=entropy)
