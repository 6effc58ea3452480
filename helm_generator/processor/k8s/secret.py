"""
Secret processor

Decodes Secret data before value processing so that large certificates,
JSON credentials and similar payloads are classified by their real content.
Externalized data is re-encoded with b64enc at render time.
"""

import base64
import binascii
from typing import Any, Dict, Optional

from ...constants import PRIORITY_DEFAULT
from ...resource import ResourceTypeKey, get_annotations, get_name, get_namespace
from ..base import (
    BaseProcessor,
    Context,
    Result,
    sanitize_name,
    service_name_from_resource,
    source_resource_id,
)
from .common import process_data_map

SECRET_TYPE = ResourceTypeKey(group='', version='v1', kind='Secret')


def decode_secret_value(value: str) -> Optional[str]:
    """Decode a Secret data entry, or None if it is not base64 of UTF-8 text"""
    try:
        return base64.b64decode(value, validate=True).decode('utf-8')
    except (binascii.Error, ValueError):
        return None


class SecretProcessor(BaseProcessor):
    """Processor for Secret templates"""

    def __init__(self):
        super().__init__('secret', PRIORITY_DEFAULT, SECRET_TYPE)

    def process(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        name = get_name(obj)
        service_name = sanitize_name(service_name_from_resource(obj))
        secret_key = sanitize_name(name) or 'secret'

        values, external_files = self._extract_values(ctx, obj)

        return Result(
            processed=True,
            service_name=service_name,
            template_path=f"templates/{service_name}-secret-{name}.yaml",
            template_content=self._generate_template(ctx, service_name, secret_key, name),
            values_path=f"services.{service_name}.secrets.{secret_key}",
            values=values,
            external_files=external_files,
            metadata={'name': name, 'namespace': get_namespace(obj)},
        )

    def _extract_values(self, ctx: Context, obj: Dict[str, Any]):
        source = source_resource_id(obj)
        values = {'enabled': True, 'type': obj.get('type') or 'Opaque'}
        external_files = []

        data = obj.get('data')
        if isinstance(data, dict) and data:
            # binary payloads stay encoded and inline
            decoded = {}
            for key, raw in data.items():
                text = decode_secret_value(str(raw))
                if text is not None:
                    decoded[key] = text

            processed, files = process_data_map(ctx, source, decoded, {'_base64': True})
            external_files.extend(files)
            values['data'] = {
                key: processed[key] if isinstance(processed.get(key), dict) else raw
                for key, raw in data.items()
            }

        string_data = obj.get('stringData')
        if isinstance(string_data, dict) and string_data:
            values['stringData'], files = process_data_map(ctx, source, string_data)
            external_files.extend(files)

        annotations = get_annotations(obj)
        if annotations:
            values['annotations'] = annotations

        return values, external_files

    def _generate_template(self, ctx: Context, service_name: str, secret_key: str, name: str) -> str:
        chart = ctx.chart_name
        return f'''{{{{- $svc := .Values.services.{service_name} -}}}}
{{{{- $secret := $svc.secrets.{secret_key} -}}}}
{{{{- if $secret.enabled }}}}
apiVersion: v1
kind: Secret
metadata:
  name: {{{{ include "{chart}.fullname" $ }}}}-{name}
  namespace: {{{{ $.Release.Namespace }}}}
  labels:
    {{{{- include "{chart}.labels" $ | nindent 4 }}}}
    app.kubernetes.io/component: {service_name}
  {{{{- with $secret.annotations }}}}
  annotations:
    {{{{- toYaml . | nindent 4 }}}}
  {{{{- end }}}}
type: {{{{ $secret.type }}}}
{{{{- with $secret.data }}}}
data:
  {{{{- range $key, $value := . }}}}
  {{{{- if and (kindIs "map" $value) (hasKey $value "_externalFile") }}}}
  {{{{ $key }}}}: {{{{ $.Files.Get $value._externalFile | b64enc }}}}
  {{{{- else }}}}
  {{{{ $key }}}}: {{{{ $value }}}}
  {{{{- end }}}}
  {{{{- end }}}}
{{{{- end }}}}
{{{{- with $secret.stringData }}}}
stringData:
  {{{{- range $key, $value := . }}}}
  {{{{- if and (kindIs "map" $value) (hasKey $value "_externalFile") }}}}
  {{{{ $key }}}}: |
    {{{{- $.Files.Get $value._externalFile | nindent 4 }}}}
  {{{{- else }}}}
  {{{{ $key }}}}: |
    {{{{- $value | nindent 4 }}}}
  {{{{- end }}}}
  {{{{- end }}}}
{{{{- end }}}}
{{{{- end }}}}
'''
