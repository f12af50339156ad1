import re
from datetime import datetime, timezone

from core import naming


def test_plain_key_prefixes_millis():
    assert naming.plain_key("clip.mp4", millis=1700000000000) == "1700000000000-clip.mp4"


def test_plain_key_uses_current_time():
    before = naming.now_millis()
    key = naming.plain_key("a.mp4")
    after = naming.now_millis()

    ms = int(key.split("-", 1)[0])
    assert before <= ms <= after
    assert key.endswith("-a.mp4")


def test_extension_is_text_after_last_dot():
    assert naming.extension_of("demo.wav") == "wav"
    assert naming.extension_of("archive.tar.gz") == "gz"
    assert naming.extension_of("audio/1-x.mp3") == "mp3"


def test_extension_without_dot_is_whole_name():
    # existing behavior, deliberately kept
    assert naming.extension_of("README") == "README"


def test_extension_of_trailing_dot_is_empty():
    assert naming.extension_of("weird.") == ""


def test_audio_identifier_shape():
    ident = naming.audio_identifier("demo.wav", millis=123)
    assert re.match(r"^123-[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\.wav$", ident)
    assert naming.audio_key(ident) == f"audio/{ident}"


def test_trailing_segment():
    assert naming.trailing_segment("audio/1-x.wav") == "1-x.wav"
    assert naming.trailing_segment("1-x.wav") == "1-x.wav"


def test_iso_timestamp_has_millis_and_z():
    dt = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
    assert naming.iso_timestamp(dt) == "2024-05-01T12:30:45.123Z"
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", naming.iso_timestamp())
