"""
Value Processor Module

Combines value classification with a size policy to decide whether a value
stays inline in values.yaml or moves to an external file under files/.
"""

import hashlib
import json
import re
from dataclasses import dataclass, field
from typing import Dict

from ..constants import DEFAULT_SIZE_THRESHOLD, EXTERNAL_FILES_DIR
from .classifier import (
    DataType,
    decode_base64,
    detect_type,
    parse_json_document,
    parse_xml_document,
)


@dataclass(frozen=True)
class ProcessedValue:
    """Classification and externalization decision for one raw value"""

    original: str
    detected_type: DataType
    size: int
    externalize: bool
    external_path: str
    formatted_value: str
    checksum: str
    metadata: Dict[str, str] = field(default_factory=dict)


def checksum_of(content: str) -> str:
    """SHA-256 hex digest of content encoded as UTF-8"""
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def sanitize_path_component(name: str) -> str:
    """Lowercase a name and replace anything outside [a-z0-9_-] with '_'"""
    sanitized = re.sub(r'[^a-z0-9_-]+', '_', name.lower()).strip('_')
    return sanitized or 'value'


class ValueProcessor:
    """Processes raw string values extracted from manifests"""

    def __init__(self, size_threshold: int = DEFAULT_SIZE_THRESHOLD, pretty_print: bool = True,
                 files_dir: str = EXTERNAL_FILES_DIR):
        """Initialize ValueProcessor

        Args:
            size_threshold: Raw size in bytes at or above which values are externalized
            pretty_print: Reformat JSON/XML values before checksumming
            files_dir: Chart-relative directory for external files
        """
        if size_threshold < 1:
            raise ValueError(f"size_threshold must be positive, got {size_threshold}")
        self.size_threshold = size_threshold
        self.pretty_print = pretty_print
        self.files_dir = files_dir.strip('/')

    def process(self, source_resource: str, field_key: str, value: str) -> ProcessedValue:
        """Classify, format and checksum a value.

        Args:
            source_resource: Identity of the resource the value came from (e.g. 'ConfigMap/default/app')
            field_key: Key of the value within the resource (e.g. 'config.json')
            value: Raw string value

        Returns:
            ProcessedValue with the externalization decision
        """
        detected_type = detect_type(value)
        size = len(value.encode('utf-8'))
        formatted, metadata = self._format_value(value, detected_type)
        metadata['key'] = field_key
        metadata['source'] = source_resource

        return ProcessedValue(
            original=value,
            detected_type=detected_type,
            size=size,
            externalize=size >= self.size_threshold,
            external_path=self.external_path(source_resource, field_key, detected_type),
            formatted_value=formatted,
            checksum=checksum_of(formatted),
            metadata=metadata,
        )

    def process_batch(self, source_resource: str, data: Dict[str, str]) -> Dict[str, ProcessedValue]:
        """Process every key of a data map (ConfigMap data, Secret stringData)"""
        return {key: self.process(source_resource, key, value) for key, value in data.items()}

    def external_path(self, source_resource: str, field_key: str, detected_type: DataType) -> str:
        """Deterministic chart-relative path for an externalized value.

        'ConfigMap/default/app-config' + 'nginx.conf' (text) ->
        'files/configmap_default_app-config/nginx_conf.txt'
        """
        source = '_'.join(
            sanitize_path_component(part) for part in source_resource.split('/') if part
        )
        filename = f"{sanitize_path_component(field_key)}.{detected_type.extension}"
        return f"{self.files_dir}/{source or 'resource'}/{filename}"

    def _format_value(self, value: str, detected_type: DataType):
        metadata = {}

        if detected_type == DataType.JSON and self.pretty_print:
            return json.dumps(parse_json_document(value), indent=2, ensure_ascii=False, allow_nan=False) + '\n', metadata

        if detected_type == DataType.XML and self.pretty_print:
            return self._pretty_xml(value), metadata

        if detected_type == DataType.BINARY:
            metadata['encoding'] = 'base64'
            metadata['decoded_size'] = str(len(decode_base64(value)))

        return value, metadata

    def _pretty_xml(self, value: str) -> str:
        document = parse_xml_document(value)
        pretty = document.toprettyxml(indent='  ')
        # toprettyxml keeps original whitespace text nodes as blank lines
        lines = [line for line in pretty.splitlines() if line.strip()]
        return '\n'.join(lines) + '\n'
