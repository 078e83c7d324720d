import re

import pytest

from media_repo.errors import ConfigurationError
from media_repo.sanitize import make_stored_name, sanitize_filename, unique_timestamp_ms

SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


@pytest.fixture(autouse=True)
def reset_stamp(monkeypatch):
    monkeypatch.setattr("media_repo.sanitize._last_stamp", 0)


@pytest.mark.parametrize(
    "original, expected",
    [
        ("my song.mp3", "my_song.mp3"),
        ("my   song\t\tfinal.mp3", "my_song_final.mp3"),
        ("über cool (live) [2024].flac", "ber_cool_live_2024.flac"),
        ("../../etc/passwd", "....etcpasswd"),
        ("a/b\\c:d*e?.mp4", "abcde.mp4"),
        ("already-safe_name.v2.mp4", "already-safe_name.v2.mp4"),
        (" leading and trailing ", "_leading_and_trailing_"),
    ],
)
def test_sanitize_filename(original, expected):
    assert sanitize_filename(original) == expected


@pytest.mark.parametrize(
    "original",
    ["song.mp3", "my song!.mp3", "weird space.ogg", "tab\tand\nnewline.wav", "$$$ cash $$$.mp3"],
)
def test_sanitized_names_only_contain_safe_characters(original):
    assert SAFE_NAME.match(sanitize_filename(original))


def test_whitespace_collapsed_before_filtering():
    # the underscore survives even though the surrounding characters are dropped
    assert sanitize_filename("#  #") == "_"


def test_sanitize_has_no_length_cap():
    long_name = "a" * 5000 + ".mp3"
    assert sanitize_filename(long_name) == long_name


def test_sanitize_none_is_empty():
    assert sanitize_filename(None) == ""


def test_timestamp_strategy_prefixes_clock_value():
    stored = make_stored_name("my song.mp3", strategy="timestamp", clock=lambda: 4_102_444_800_000)
    assert stored == "4102444800000-my_song.mp3"


def test_timestamp_strategy_never_repeats_for_a_frozen_clock():
    frozen = lambda: 1_000  # noqa: E731
    names = {make_stored_name("same.mp3", clock=frozen) for _ in range(5)}
    assert len(names) == 5
    for name in names:
        assert name.endswith("-same.mp3")


def test_unique_timestamp_is_strictly_increasing():
    stamps = [unique_timestamp_ms() for _ in range(50)]
    assert stamps == sorted(set(stamps))


def test_original_strategy_keeps_sanitized_name():
    assert make_stored_name("my song.mp3", strategy="original") == "my_song.mp3"
    assert make_stored_name("my song.mp3", strategy="original") == "my_song.mp3"


@pytest.mark.parametrize("original", [None, "", "..", ".", "!!!", "  "])
def test_degenerate_names_fall_back(original):
    stored = make_stored_name(original, strategy="original")
    # whitespace-only names collapse to "_" which is a usable name
    assert stored in ("file", "_")
    assert stored not in (".", "..")


def test_unknown_strategy_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        make_stored_name("song.mp3", strategy="random")
