import base64
import mimetypes
import os
import re
from typing import List, Literal, Optional

CURRENCY = "₹"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_price(value) -> int:
    """
    Read a price the way a browser's parseInt would: the leading integer of its
    text, or 0 when there is none ("1200" -> 1200, "12.9" -> 12, "abc" -> 0).
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value if value is not None else ""))
    return int(match.group(1)) if match else 0


def format_price(value) -> str:
    return f"{CURRENCY}{parse_price(value)}"


def encode_data_url(path: str | os.PathLike) -> str:
    """Read a file and return it as a base64 `data:` URL (blocking)."""
    mime, _ = mimetypes.guess_type(os.fspath(path))
    with open(path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime or 'application/octet-stream'};base64,{payload}"


def _cell(value) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows; cells are stringified and pipes escaped.
        aligns: One of 'l', 'c', 'r' per column. Defaults to all left.

    Returns:
        str: Markdown formatted table, or "" when there is nothing to show.
    """
    if not rows and not headers:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    aligns = aligns or ["l"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    rule = {"l": ":---", "c": ":---:", "r": "---:"}
    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "| " + " | ".join(rule[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(_cell(c) for c in row) + " |" for row in rows]
    return "\n".join(lines)


def describe_image(image: str) -> str:
    """Short text for an image reference; uploaded images are inline data URLs."""
    if image.startswith("data:"):
        mime = image[5:].split(";", 1)[0] or "image"
        return f"uploaded {mime} ({len(image) // 1024} KB inline)"
    return image
