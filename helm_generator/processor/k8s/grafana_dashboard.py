"""
Grafana dashboard processor

Intercepts ConfigMaps labelled grafana_dashboard: "1" (Grafana sidecar
provisioning) ahead of the generic ConfigMap processor. Other ConfigMaps are
declined and fall through.
"""

from typing import Any, Dict, Optional

from ...constants import GRAFANA_DASHBOARD_LABEL, PRIORITY_SPECIALIZED
from ...resource import get_labels, get_name, get_namespace
from ..base import (
    NOT_PROCESSED,
    BaseProcessor,
    Context,
    Result,
    sanitize_name,
    service_name_from_resource,
    source_resource_id,
)
from .common import process_data_map
from .configmap import CONFIGMAP_TYPE


def is_grafana_dashboard(obj: Dict[str, Any]) -> bool:
    return str(get_labels(obj).get(GRAFANA_DASHBOARD_LABEL, '')) == '1'


class GrafanaDashboardProcessor(BaseProcessor):
    """Processor for Grafana dashboard ConfigMaps"""

    def __init__(self):
        super().__init__('grafanadashboard', PRIORITY_SPECIALIZED, CONFIGMAP_TYPE)

    def process(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        if not is_grafana_dashboard(obj):
            return NOT_PROCESSED

        name = get_name(obj)
        service_name = sanitize_name(service_name_from_resource(obj))
        dashboard_key = sanitize_name(name) or 'dashboard'

        values = {'enabled': True}
        external_files = []
        data = obj.get('data')
        if isinstance(data, dict) and data:
            values['dashboards'], external_files = process_data_map(ctx, source_resource_id(obj), data)

        return Result(
            processed=True,
            service_name=service_name,
            template_path=f"templates/grafana-dashboard-{name}.yaml",
            template_content=self._generate_template(ctx, service_name, dashboard_key, name),
            values_path=f"services.{service_name}.grafanaDashboards.{dashboard_key}",
            values=values,
            external_files=external_files,
            metadata={'name': name, 'namespace': get_namespace(obj), 'type': 'grafana_dashboard'},
        )

    def _generate_template(self, ctx: Context, service_name: str, dashboard_key: str, name: str) -> str:
        return f'''{{{{- with .Values.services.{service_name}.grafanaDashboards.{dashboard_key} }}}}
{{{{- if .enabled }}}}
apiVersion: v1
kind: ConfigMap
metadata:
  name: {name}
  namespace: {{{{ $.Release.Namespace }}}}
  labels:
    {{{{- include "{ctx.chart_name}.labels" $ | nindent 4 }}}}
    grafana_dashboard: "1"
data:
  {{{{- range $key, $value := .dashboards }}}}
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
