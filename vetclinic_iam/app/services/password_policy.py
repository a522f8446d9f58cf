"""
Password strength policy.

Minimum length is always enforced; mixed case and digit rules are switched on
through configuration.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 8
    require_mixed_case: bool = False
    require_digit: bool = False

    @classmethod
    def from_config(cls, config) -> "PasswordPolicy":
        return cls(
            min_length=config.PASSWORD_MIN_LENGTH,
            require_mixed_case=config.PASSWORD_REQUIRE_MIXED_CASE,
            require_digit=config.PASSWORD_REQUIRE_DIGIT,
        )

    def unmet_rules(self, password: str) -> List[str]:
        """Messages for every rule the password fails, empty when it passes"""
        unmet = []
        if len(password) < self.min_length:
            unmet.append(f"Password must be at least {self.min_length} characters long")
        if self.require_mixed_case and not (
            any(c.islower() for c in password) and any(c.isupper() for c in password)
        ):
            unmet.append("Password must contain both uppercase and lowercase letters")
        if self.require_digit and not any(c.isdigit() for c in password):
            unmet.append("Password must contain at least one digit")
        return unmet
