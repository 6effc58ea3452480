"""
ConfigMap processor

Generic handler for v1 ConfigMaps. Large data values are externalized to
files/ and read back with .Files.Get.
"""

from typing import Any, Dict, Optional

from ...constants import PRIORITY_GENERIC
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

CONFIGMAP_TYPE = ResourceTypeKey(group='', version='v1', kind='ConfigMap')


class ConfigMapProcessor(BaseProcessor):
    """Processor for ConfigMap templates"""

    def __init__(self):
        super().__init__('configmap', PRIORITY_GENERIC, CONFIGMAP_TYPE)

    def process(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        name = get_name(obj)
        service_name = sanitize_name(service_name_from_resource(obj))
        config_key = sanitize_name(name) or 'config'

        values, external_files = self._extract_values(ctx, obj)

        return Result(
            processed=True,
            service_name=service_name,
            template_path=f"templates/{service_name}-configmap-{name}.yaml",
            template_content=self._generate_template(ctx, service_name, config_key, name),
            values_path=f"services.{service_name}.configMaps.{config_key}",
            values=values,
            external_files=external_files,
            metadata={'name': name, 'namespace': get_namespace(obj)},
        )

    def _extract_values(self, ctx: Context, obj: Dict[str, Any]):
        values = {'enabled': True}
        external_files = []

        data = obj.get('data')
        if isinstance(data, dict) and data:
            values['data'], external_files = process_data_map(ctx, source_resource_id(obj), data)

        if isinstance(obj.get('binaryData'), dict):
            values['binaryData'] = obj['binaryData']

        if isinstance(obj.get('immutable'), bool):
            values['immutable'] = obj['immutable']

        annotations = get_annotations(obj)
        if annotations:
            values['annotations'] = annotations

        return values, external_files

    def _generate_template(self, ctx: Context, service_name: str, config_key: str, name: str) -> str:
        chart = ctx.chart_name
        return f'''{{{{- $svc := .Values.services.{service_name} -}}}}
{{{{- $cm := $svc.configMaps.{config_key} -}}}}
{{{{- if $cm.enabled }}}}
apiVersion: v1
kind: ConfigMap
metadata:
  name: {{{{ include "{chart}.fullname" $ }}}}-{name}
  namespace: {{{{ $.Release.Namespace }}}}
  labels:
    {{{{- include "{chart}.labels" $ | nindent 4 }}}}
    app.kubernetes.io/component: {service_name}
  {{{{- with $cm.annotations }}}}
  annotations:
    {{{{- toYaml . | nindent 4 }}}}
  {{{{- end }}}}
{{{{- with $cm.immutable }}}}
immutable: {{{{ . }}}}
{{{{- end }}}}
{{{{- with $cm.data }}}}
data:
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
{{{{- with $cm.binaryData }}}}
binaryData:
  {{{{- toYaml . | nindent 2 }}}}
{{{{- end }}}}
{{{{- end }}}}
'''
