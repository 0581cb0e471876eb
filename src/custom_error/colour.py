from enum import Enum

__all__ = ['Role', 'decorate']

_RESET = "\033[0m"


class Role(Enum):
    """Text decoration role; each emphasis level maps to one terminal colour."""
    PLAIN = ''
    EMPHASIS_1 = "\033[31m"  # red: blocking diagnostics
    EMPHASIS_2 = "\033[34m"  # blue: non-blocking diagnostics, suggestions
    EMPHASIS_3 = "\033[32m"  # green: version
    EMPHASIS_4 = "\033[33m"  # yellow: underlying errors


def decorate(text: str, role: Role, enabled: bool = False) -> str:
    """Wrap text in the colour for `role`; identity when decoration is disabled."""
    if not enabled or role is Role.PLAIN or not text:
        return text
    return f"{role.value}{text}{_RESET}"
