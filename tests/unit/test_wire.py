"""Tests for the line-based wire encoding."""

import pytest

from conftest import collect, run_async
from vidchat.core.stream import DataFrame, ErrorFrame, TextFrame
from vidchat.core.wire import FrameDecodeError, decode_frame, encode_frame, encode_stream


class TestEncode:

    def test_text(self):
        assert encode_frame(TextFrame("Hi")) == '0:"Hi"\n'

    def test_text_escapes_newlines_and_quotes(self):
        line = encode_frame(TextFrame('say "hi"\nthen'))
        assert line.count("\n") == 1
        assert line == '0:"say \\"hi\\"\\nthen"\n'

    def test_data_is_wrapped_in_array(self):
        frame = DataFrame({"type": "image_url", "data": {"url": "http://x/img.png"}})
        assert encode_frame(frame) == '2:[{"type": "image_url", "data": {"url": "http://x/img.png"}}]\n'

    def test_error(self):
        assert encode_frame(ErrorFrame("boom")) == '3:"boom"\n'

    def test_unknown_frame_rejected(self):
        with pytest.raises(TypeError):
            encode_frame("not a frame")


class TestDecode:

    @pytest.mark.parametrize("frame", [
        TextFrame("multi\nline"),
        DataFrame({"type": "sources", "data": {"nodes": []}}),
        ErrorFrame("boom"),
    ])
    def test_decodes_encoded_frame(self, frame):
        assert decode_frame(encode_frame(frame)) == frame

    @pytest.mark.parametrize("line", [
        "no-prefix",
        "9:\"x\"",
        "0:not json",
        "0:[1]",
        "2:{\"not\": \"array\"}",
    ])
    def test_malformed_lines(self, line):
        with pytest.raises(FrameDecodeError):
            decode_frame(line)


def test_encode_stream():
    async def frames():
        yield TextFrame("a")
        yield DataFrame(1)

    assert run_async(collect(encode_stream(frames()))) == ['0:"a"\n', "2:[1]\n"]
