import enum
import unicodedata


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def display_width(s: str) -> int:
    """Terminal columns taken by s; Hangul syllables and other wide characters take two."""
    return sum(2 if unicodedata.east_asian_width(c) in ("W", "F") else 1 for c in s)


def point_at(code: str, idx: int, context: int = 10) -> list[str]:
    print_start_idx = max(0, idx - context)
    print_ellipsis_pre = print_start_idx > 0
    print_end_idx = min(len(code), idx + context)
    print_ellipsis_post = print_end_idx < len(code)
    excerpt = (
        ("..." if print_ellipsis_pre else "")
        + code[print_start_idx:print_end_idx]
        + ("..." if print_ellipsis_post else "")
    )
    padding = display_width(code[print_start_idx:idx]) + (3 if print_ellipsis_pre else 0)
    return [excerpt, " " * padding + "^"]
