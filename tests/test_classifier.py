"""
Tests for value classification
"""
import base64

import pytest

from helm_generator.value.classifier import DataType, decode_base64, detect_type, parse_json_document


class TestDetectType:
    """Test detect_type ordering and edge cases"""

    def test_empty_string_is_text(self):
        assert detect_type('') == DataType.TEXT

    def test_plain_word_is_text(self):
        assert detect_type('hello') == DataType.TEXT

    def test_json_object(self):
        assert detect_type('{"port":80,"workers":4}') == DataType.JSON

    def test_json_array_with_surrounding_whitespace(self):
        assert detect_type('  [1, 2, 3]\n') == DataType.JSON

    @pytest.mark.parametrize('value', ['42', 'true', 'null', '"quoted"', '3.14'])
    def test_bare_json_scalars_are_text(self, value):
        """JSON scalars parse, but are not structured documents"""
        assert detect_type(value) == DataType.TEXT

    def test_invalid_json_is_text(self):
        assert detect_type('{"port": 80,') == DataType.TEXT

    def test_xml_with_prologue(self):
        value = '<?xml version="1.0" encoding="UTF-8"?>\n<config><server port="80"/></config>'
        assert detect_type(value) == DataType.XML

    def test_xml_single_root_element(self):
        assert detect_type('<settings><debug>true</debug></settings>') == DataType.XML

    def test_xml_with_trailing_text_is_text(self):
        assert detect_type('<b>bold</b> and more') == DataType.TEXT

    def test_unclosed_xml_is_text(self):
        assert detect_type('<config><server>') == DataType.TEXT

    def test_base64_binary(self):
        encoded = base64.b64encode(bytes(range(256))).decode()
        assert detect_type(encoded) == DataType.BINARY

    def test_line_wrapped_base64_binary(self):
        encoded = base64.encodebytes(bytes(range(256)) * 2).decode()
        assert '\n' in encoded
        assert detect_type(encoded) == DataType.BINARY

    def test_base64_of_readable_text_is_text(self):
        """Readable decoded content is never treated as binary"""
        encoded = base64.b64encode(b'this is perfectly readable text').decode()
        assert detect_type(encoded) == DataType.TEXT

    def test_base64_of_json_is_text(self):
        encoded = base64.b64encode(b'{"user": "admin", "password": "secret"}').decode()
        assert detect_type(encoded) == DataType.TEXT

    def test_short_base64_candidate_is_text(self):
        assert detect_type('abcd') == DataType.TEXT

    def test_json_checked_before_xml(self):
        assert detect_type('["<a/>"]') == DataType.JSON

    @pytest.mark.parametrize('value', ['{"a": NaN}', '[Infinity]', '{"b": -Infinity}'])
    def test_non_json_constants_are_text(self, value):
        assert detect_type(value) == DataType.TEXT

    def test_float_overflow_is_text(self):
        assert detect_type('{"x": 1e400}') == DataType.TEXT

    def test_large_finite_float_is_json(self):
        assert detect_type('{"x": 1e300}') == DataType.JSON


class TestHelpers:
    """Test parsing helpers"""

    def test_parse_json_document_returns_composite(self):
        assert parse_json_document('{"a": 1}') == {'a': 1}

    def test_parse_json_document_rejects_scalar(self):
        assert parse_json_document('42') is None

    def test_decode_base64_bad_padding(self):
        assert decode_base64('QUJDREVGR0hJSktMTU5PUA=') is None

    def test_decode_base64_bad_alphabet(self):
        assert decode_base64('not base64 at all, has spaces') is None

    def test_decode_base64_valid(self):
        assert decode_base64('QUJDREVGR0hJSktMTU5PUA==') == b'ABCDEFGHIJKLMNOP'

    def test_extensions(self):
        assert DataType.JSON.extension == 'json'
        assert DataType.XML.extension == 'xml'
        assert DataType.BINARY.extension == 'bin'
        assert DataType.TEXT.extension == 'txt'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
