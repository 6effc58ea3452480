"""
Deployment processor

Extracts replicas, container images/resources and pod settings into values,
and declares dependencies on referenced ConfigMaps, Secrets, PVCs and the
ServiceAccount.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...constants import PRIORITY_DEFAULT
from ...resource import ResourceTypeKey, get_name, get_namespace, nested_get, nested_int
from ..base import BaseProcessor, Context, Result, sanitize_name, service_name_from_resource
from ..dependencies import pod_spec_dependencies

DEPLOYMENT_TYPE = ResourceTypeKey(group='apps', version='v1', kind='Deployment')

# Container fields copied verbatim into values
CONTAINER_FIELDS = [
    'command', 'args', 'ports', 'env', 'envFrom', 'resources', 'volumeMounts',
    'livenessProbe', 'readinessProbe', 'startupProbe', 'securityContext', 'imagePullPolicy',
]

# Pod spec fields copied verbatim into values
POD_FIELDS = [
    'serviceAccountName', 'imagePullSecrets', 'volumes', 'nodeSelector', 'affinity',
    'tolerations', 'securityContext', 'priorityClassName', 'topologySpreadConstraints',
]


def split_image(image: str) -> Tuple[str, str]:
    """Split 'repo:tag' into (repository, tag); digests and ports are respected

    Args:
        image: Container image reference

    Returns:
        Tuple of (repository, tag); tag is '' when absent
    """
    if '@' in image:
        repository, digest = image.split('@', 1)
        return repository, f"@{digest}"
    last_colon = image.rfind(':')
    if last_colon == -1 or '/' in image[last_colon:]:
        return image, ''
    return image[:last_colon], image[last_colon + 1:]


class DeploymentProcessor(BaseProcessor):
    """Processor for Deployment templates"""

    def __init__(self):
        super().__init__('deployment', PRIORITY_DEFAULT, DEPLOYMENT_TYPE)

    def process(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        name = get_name(obj)
        namespace = get_namespace(obj)
        service_name = sanitize_name(service_name_from_resource(obj))

        values = self._extract_values(obj)
        pod_spec = nested_get(obj, 'spec', 'template', 'spec') or {}
        dependencies = pod_spec_dependencies(pod_spec, namespace)

        return Result(
            processed=True,
            service_name=service_name,
            template_path=f"templates/{service_name}-deployment.yaml",
            template_content=self._generate_template(ctx, service_name, name),
            values_path=f"services.{service_name}.deployment",
            values=values,
            dependencies=dependencies,
            metadata={'name': name, 'namespace': namespace},
        )

    def _extract_values(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        values = {'enabled': True}

        replicas = nested_int(obj, 'spec', 'replicas')
        values['replicas'] = 1 if replicas is None else replicas

        for field in ('strategy', 'revisionHistoryLimit', 'minReadySeconds'):
            value = nested_get(obj, 'spec', field)
            if value is not None:
                values[field] = value

        selector = nested_get(obj, 'spec', 'selector', 'matchLabels')
        if selector:
            values['selectorLabels'] = selector

        pod_labels = nested_get(obj, 'spec', 'template', 'metadata', 'labels')
        if pod_labels:
            values['podLabels'] = pod_labels

        pod_annotations = nested_get(obj, 'spec', 'template', 'metadata', 'annotations')
        if pod_annotations:
            values['podAnnotations'] = pod_annotations

        pod_spec = nested_get(obj, 'spec', 'template', 'spec') or {}
        values['containers'] = self._extract_containers(pod_spec.get('containers'))
        if pod_spec.get('initContainers'):
            values['initContainers'] = self._extract_containers(pod_spec['initContainers'])

        for field in POD_FIELDS:
            if pod_spec.get(field) is not None:
                values[field] = pod_spec[field]

        return values

    def _extract_containers(self, containers: Optional[List[Any]]) -> List[Dict[str, Any]]:
        extracted = []
        for container in containers or []:
            if not isinstance(container, dict):
                continue
            repository, tag = split_image(container.get('image', ''))
            values = {
                'name': container.get('name', ''),
                'image': {'repository': repository, 'tag': tag},
            }
            for field in CONTAINER_FIELDS:
                if container.get(field) is not None:
                    values[field] = container[field]
            extracted.append(values)
        return extracted

    def _generate_template(self, ctx: Context, service_name: str, name: str) -> str:
        chart = ctx.chart_name
        return f'''{{{{- $svc := .Values.services.{service_name} -}}}}
{{{{- with $svc.deployment }}}}
{{{{- if .enabled }}}}
apiVersion: apps/v1
kind: Deployment
metadata:
  name: {{{{ include "{chart}.fullname" $ }}}}-{name}
  namespace: {{{{ $.Release.Namespace }}}}
  labels:
    {{{{- include "{chart}.labels" $ | nindent 4 }}}}
    app.kubernetes.io/component: {service_name}
spec:
  replicas: {{{{ .replicas }}}}
  {{{{- with .strategy }}}}
  strategy:
    {{{{- toYaml . | nindent 4 }}}}
  {{{{- end }}}}
  selector:
    matchLabels:
      {{{{- toYaml .selectorLabels | nindent 6 }}}}
  template:
    metadata:
      labels:
        {{{{- toYaml .podLabels | nindent 8 }}}}
      {{{{- with .podAnnotations }}}}
      annotations:
        {{{{- toYaml . | nindent 8 }}}}
      {{{{- end }}}}
    spec:
      {{{{- range $field := list "serviceAccountName" "priorityClassName" }}}}
      {{{{- with index $.Values.services.{service_name}.deployment $field }}}}
      {{{{ $field }}}}: {{{{ . }}}}
      {{{{- end }}}}
      {{{{- end }}}}
      {{{{- range $field := list "imagePullSecrets" "volumes" "nodeSelector" "affinity" "tolerations" "securityContext" "topologySpreadConstraints" }}}}
      {{{{- with index $.Values.services.{service_name}.deployment $field }}}}
      {{{{ $field }}}}:
        {{{{- toYaml . | nindent 8 }}}}
      {{{{- end }}}}
      {{{{- end }}}}
      {{{{- with .initContainers }}}}
      initContainers:
        {{{{- include "{chart}.containers" . | nindent 8 }}}}
      {{{{- end }}}}
      containers:
        {{{{- include "{chart}.containers" .containers | nindent 8 }}}}
{{{{- end }}}}
{{{{- end }}}}
'''
