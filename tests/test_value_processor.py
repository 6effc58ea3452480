"""
Tests for ValueProcessor module
"""
import base64
import hashlib
import json

import pytest

from helm_generator.value import DataType, ExternalFileManager, ValueProcessor

SOURCE = 'ConfigMap/default/app-config'


def text_of_size(size: int) -> str:
    """Readable text (never base64-like) of exactly `size` bytes"""
    return ('log line with spaces\n' * (size // 21 + 1))[:size]


class TestValueProcessor:
    """Test ValueProcessor functionality"""

    @pytest.fixture
    def processor(self):
        return ValueProcessor()

    def test_plain_text_stays_inline(self, processor):
        processed = processor.process(SOURCE, 'greeting', 'hello')

        assert processed.detected_type == DataType.TEXT
        assert processed.externalize is False
        assert processed.formatted_value == 'hello'
        assert processed.size == 5
        assert processed.checksum == hashlib.sha256(b'hello').hexdigest()

    def test_small_json_is_structured_and_inline(self, processor):
        processed = processor.process(SOURCE, 'config.json', '{"port":80,"workers":4}')

        assert processed.detected_type == DataType.JSON
        assert processed.externalize is False
        assert json.loads(processed.formatted_value) == {'port': 80, 'workers': 4}

    def test_json_is_pretty_printed_before_checksum(self, processor):
        raw = '{"port":80,"workers":4}'
        processed = processor.process(SOURCE, 'config.json', raw)

        expected = '{\n  "port": 80,\n  "workers": 4\n}\n'
        assert processed.formatted_value == expected
        assert processed.checksum == hashlib.sha256(expected.encode()).hexdigest()
        assert processed.checksum != hashlib.sha256(raw.encode()).hexdigest()

    def test_json_formatting_ignores_source_whitespace(self, processor):
        compact = processor.process(SOURCE, 'config.json', '{"a":1,"b":[1,2]}')
        spaced = processor.process(SOURCE, 'config.json', '{ "a" : 1,\n   "b": [1, 2] }')

        assert compact.formatted_value == spaced.formatted_value
        assert compact.checksum == spaced.checksum

    @pytest.mark.parametrize('raw', ['{"x": 1e400}', '{"a": NaN}'])
    def test_non_finite_numbers_are_not_reformatted(self, processor, raw):
        processed = processor.process(SOURCE, 'config.json', raw)

        assert processed.detected_type == DataType.TEXT
        assert processed.formatted_value == raw
        assert 'Infinity' not in processed.formatted_value
        assert processed.external_path.endswith('.txt')

    def test_pretty_print_disabled_keeps_raw_json(self):
        processor = ValueProcessor(pretty_print=False)
        raw = '{"port":80}'

        processed = processor.process(SOURCE, 'config.json', raw)

        assert processed.detected_type == DataType.JSON
        assert processed.formatted_value == raw

    def test_xml_with_prologue_is_reformatted(self, processor):
        raw = '<?xml version="1.0" encoding="UTF-8"?><config><server port="80"/><debug>true</debug></config>'

        processed = processor.process(SOURCE, 'app.xml', raw)

        assert processed.detected_type == DataType.XML
        assert processed.formatted_value.startswith('<?xml')
        assert '  <debug>true</debug>' in processed.formatted_value
        assert processed.external_path.endswith('.xml')

    def test_large_text_is_externalized(self, processor):
        value = text_of_size(2048)

        processed = processor.process(SOURCE, 'app.log', value)
        manager = ExternalFileManager()
        file = manager.add_from_processed(SOURCE, 'app.log', processed)

        assert processed.detected_type == DataType.TEXT
        assert processed.externalize is True
        assert processed.checksum
        assert file.content == value
        assert manager.get(processed.external_path).content == processed.formatted_value

    def test_binary_metadata(self, processor):
        value = base64.b64encode(bytes(range(256))).decode()

        processed = processor.process('Secret/default/certs', 'keystore', value)

        assert processed.detected_type == DataType.BINARY
        assert processed.formatted_value == value
        assert processed.metadata['encoding'] == 'base64'
        assert processed.metadata['decoded_size'] == '256'
        assert processed.external_path.endswith('.bin')

    def test_metadata_records_source_and_key(self, processor):
        processed = processor.process(SOURCE, 'greeting', 'hello')

        assert processed.metadata['key'] == 'greeting'
        assert processed.metadata['source'] == SOURCE

    def test_process_batch(self, processor):
        results = processor.process_batch(SOURCE, {'a': 'hello', 'b': '{"x": 1}'})

        assert set(results) == {'a', 'b'}
        assert results['a'].detected_type == DataType.TEXT
        assert results['b'].detected_type == DataType.JSON

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            ValueProcessor(size_threshold=0)


class TestThreshold:
    """Test the externalization boundary"""

    @pytest.mark.parametrize('size,expected', [(1023, False), (1024, True), (1025, True)])
    def test_default_threshold_boundary(self, size, expected):
        processed = ValueProcessor().process(SOURCE, 'data', text_of_size(size))

        assert processed.size == size
        assert processed.externalize is expected

    @pytest.mark.parametrize('size,expected', [(99, False), (100, True), (101, True)])
    def test_configured_threshold_boundary(self, size, expected):
        processed = ValueProcessor(size_threshold=100).process(SOURCE, 'data', text_of_size(size))

        assert processed.externalize is expected

    def test_size_counts_utf8_bytes(self):
        value = 'é' * 512

        processed = ValueProcessor().process(SOURCE, 'data', value)

        assert len(value) == 512
        assert processed.size == 1024
        assert processed.externalize is True


class TestExternalPath:
    """Test deterministic external path naming"""

    def test_path_convention(self):
        processed = ValueProcessor().process(SOURCE, 'config.json', '{"port":80}')

        assert processed.external_path == 'files/configmap_default_app-config/config_json.json'

    def test_repeated_processing_is_deterministic(self):
        processor = ValueProcessor()
        value = text_of_size(4096)

        first = processor.process(SOURCE, 'nginx.conf', value)
        second = processor.process(SOURCE, 'nginx.conf', value)

        assert first.external_path == second.external_path
        assert first.checksum == second.checksum

    def test_different_fields_get_different_paths(self):
        processor = ValueProcessor()

        first = processor.process(SOURCE, 'a.conf', 'x')
        second = processor.process(SOURCE, 'b.conf', 'x')

        assert first.external_path != second.external_path

    def test_cluster_scoped_source(self):
        processed = ValueProcessor().process('ConfigMap//shared', 'Notes.TXT', 'hello')

        assert processed.external_path == 'files/configmap_shared/notes_txt.txt'

    def test_custom_files_dir(self):
        processed = ValueProcessor(files_dir='/assets/').process(SOURCE, 'k', 'v')

        assert processed.external_path.startswith('assets/')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
