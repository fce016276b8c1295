"""
Filename helpers for downloaded TikTok videos.

Builds a filesystem-safe name from the video caption, prefixed with the
original poster's handle:

    build_filename("Hello #fun", "alice")  ->  CC_alice_Hello_fun.mp4
"""

import re

MAX_NAME_LENGTH = 150
MEDIA_EXTENSION = ".mp4"


def credit_title(caption: str, username: str) -> str:
    """Prefix the caption with the original poster's handle."""
    return f"(CC @ {username}) {caption}"


def sanitize_filename(name: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Keep ASCII letters, digits, underscores, hyphens; spaces become underscores."""
    name = re.sub(r'[^a-zA-Z0-9_\- ]', '', name)
    name = re.sub(r'\s+', '_', name)
    return name[:max_length]


def build_filename(caption: str, username: str) -> str:
    return sanitize_filename(credit_title(caption, username)) + MEDIA_EXTENSION
