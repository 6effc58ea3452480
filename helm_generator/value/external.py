"""
External File Manager Module

Collects externalized values for a whole generation run and renders the
Helm snippets that read them back with .Files.Get.
"""

import posixpath
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..errors import PathConflictError
from .classifier import DataType
from .processor import ProcessedValue


@dataclass(frozen=True)
class ExternalFile:
    """A value moved out of values.yaml into the chart's files/ directory"""

    path: str
    content: str
    source_resource: str
    source_key: str
    data_type: DataType
    checksum: str


def escape_template_string(value: str) -> str:
    """Escape a value for use inside a double-quoted template string"""
    return (
        value.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\t', '\\t')
    )


class ExternalFileManager:
    """Content-addressed store of external files, keyed by chart path.

    A path may be added again only with identical content (equal checksum);
    conflicting content raises PathConflictError and leaves the stored file
    untouched. Adds are serialized so workers may share one manager.
    """

    def __init__(self):
        self._files: Dict[str, ExternalFile] = {}
        self._lock = threading.Lock()

    def add(self, file: ExternalFile) -> None:
        """Store an external file.

        Args:
            file: File to store

        Raises:
            PathConflictError: If the path already holds different content
        """
        with self._lock:
            existing = self._files.get(file.path)
            if existing is None:
                self._files[file.path] = file
                return
            if existing.checksum != file.checksum:
                raise PathConflictError(file.path, existing, file)

    def add_from_processed(self, source_resource: str, source_key: str,
                           processed: ProcessedValue) -> ExternalFile:
        """Create and store an external file from a processed value.

        Args:
            source_resource: Identity of the originating resource
            source_key: Field key within the resource
            processed: Value that was marked for externalization

        Returns:
            The stored ExternalFile

        Raises:
            ValueError: If the value was not marked for externalization
            PathConflictError: If the path already holds different content
        """
        if not processed.externalize:
            raise ValueError(f"{source_resource} [{source_key}]: value is not marked for externalization")

        file = ExternalFile(
            path=processed.external_path,
            content=processed.formatted_value,
            source_resource=source_resource,
            source_key=source_key,
            data_type=processed.detected_type,
            checksum=processed.checksum,
        )
        self.add(file)
        return file

    def get(self, path: str) -> Optional[ExternalFile]:
        return self._files.get(path)

    def get_files(self) -> List[ExternalFile]:
        """All stored files, in no particular order"""
        with self._lock:
            return list(self._files.values())

    def sorted_files(self) -> List[ExternalFile]:
        """All stored files ordered by path, for reproducible output"""
        return sorted(self.get_files(), key=lambda f: f.path)

    def snapshot(self) -> Dict[str, ExternalFile]:
        with self._lock:
            return dict(self._files)

    def restore(self, snapshot: Dict[str, ExternalFile]) -> None:
        """Discard everything added since snapshot() was taken"""
        with self._lock:
            self._files = dict(snapshot)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: str) -> bool:
        return path in self._files

    def get_helm_reference(self, path: str) -> str:
        """files/config.json -> {{ .Files.Get "files/config.json" }}"""
        return f'{{{{ .Files.Get "{path}" }}}}'

    def get_helm_reference_with_fallback(self, path: str, fallback: str) -> str:
        """Reference that renders the fallback literal when the file is missing"""
        return f'{{{{ .Files.Get "{path}" | default "{escape_template_string(fallback)}" }}}}'

    def generate_helm_helper(self, chart_name: str) -> str:
        """Generate _helpers.tpl defines for reading external files"""
        return f'''{{{{/*
Get file content with fallback
Usage: {{{{ include "{chart_name}.getFile" (dict "Files" .Files "path" "files/config.json" "default" "fallback") }}}}
*/}}}}
{{{{- define "{chart_name}.getFile" -}}}}
{{{{- $path := .path -}}}}
{{{{- $default := .default | default "" -}}}}
{{{{- .Files.Get $path | default $default -}}}}
{{{{- end -}}}}

{{{{/*
Get file content as base64
Usage: {{{{ include "{chart_name}.getFileBase64" (dict "Files" .Files "path" "files/data.bin") }}}}
*/}}}}
{{{{- define "{chart_name}.getFileBase64" -}}}}
{{{{- $path := .path -}}}}
{{{{- .Files.Get $path | b64enc -}}}}
{{{{- end -}}}}
'''

    def to_values_reference(self, file: ExternalFile) -> Dict[str, Any]:
        """values.yaml entry pointing at an external file"""
        return {
            'externalFile': {
                'enabled': True,
                'path': file.path,
                'checksum': file.checksum,
                'type': file.data_type.value,
            }
        }

    def suggest_values_structure(self) -> Optional[Dict[str, Any]]:
        """Metadata tree of every stored file, keyed by file basename.

        Intended for review and debugging. Returns None when nothing was
        externalized.
        """
        files = self.sorted_files()
        if not files:
            return None

        external_files = {}
        for file in files:
            external_files[posixpath.basename(file.path)] = {
                'path': file.path,
                'source': file.source_resource,
                'key': file.source_key,
                'type': file.data_type.value,
                'checksum': file.checksum,
            }

        return {
            'externalFiles': {
                'enabled': True,
                'files': external_files,
            }
        }

    def generate_template_annotation(self, files: List[ExternalFile]) -> str:
        """'path:checksum' pairs joined by commas, for a checksum annotation"""
        return ','.join(f"{file.path}:{file.checksum}" for file in files)
