import re

import pytest

from utils.filenames import (
    MAX_NAME_LENGTH,
    MEDIA_EXTENSION,
    build_filename,
    credit_title,
    sanitize_filename,
)


def test_credit_title():
    assert credit_title("Hello #fun", "alice") == "(CC @ alice) Hello #fun"


def test_build_filename_strips_punctuation():
    assert build_filename("Hello #fun", "alice") == "CC_alice_Hello_fun.mp4"
    assert build_filename("World!!", "bob") == "CC_bob_World.mp4"


def test_build_filename_unknown_user_keeps_prefix():
    name = build_filename("tiktok_video", "unknown_user")
    assert name == "CC_unknown_user_tiktok_video.mp4"
    assert name.startswith("CC_")


def test_sanitize_collapses_space_runs():
    assert sanitize_filename("a  b c   d") == "a_b_c_d"


def test_sanitize_drops_tabs_and_newlines():
    # Only spaces survive the character filter, so tabs vanish instead of becoming "_"
    assert sanitize_filename("a  b\t\tc   d") == "a_bc_d"
    assert sanitize_filename("one\ntwo") == "onetwo"


def test_sanitize_keeps_hyphens_and_underscores():
    assert sanitize_filename("my-clip_v2 final") == "my-clip_v2_final"


def test_sanitize_drops_non_ascii_letters():
    assert sanitize_filename("café 日本 ok") == "caf_ok"


def test_empty_caption():
    assert build_filename("", "alice") == "CC_alice_.mp4"


def test_long_caption_is_truncated():
    name = build_filename("a" * 500, "alice")
    assert name.endswith(MEDIA_EXTENSION)
    assert len(name) == MAX_NAME_LENGTH + len(MEDIA_EXTENSION)


@pytest.mark.parametrize("caption", [
    "Hello #fun",
    "emoji 🎉🎉 party",
    "../../etc/passwd",
    'quotes "and" <tags> & stuff',
    "x" * 1000,
    "line\nbreaks\r\nand\ttabs",
])
def test_filenames_are_bounded_and_safe(caption):
    name = build_filename(caption, "some.user")
    assert len(name) <= MAX_NAME_LENGTH + len(MEDIA_EXTENSION)
    assert re.fullmatch(r'[A-Za-z0-9_\-]+\.mp4', name)
