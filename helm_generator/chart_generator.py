"""
Chart Generator Module

Writes the Helm chart (Chart.yaml, values.yaml, templates and external files)
from processed resources.
"""

from pathlib import Path
from typing import Any, Dict, List

from .generator import ProcessedResource
from .utils import dump_yaml, generate_header, print_keys
from .value import ExternalFileManager


class ChartGenerator:
    """Generates Helm chart files from processed resources"""

    def __init__(self, config: Dict[str, Any], processed: List[ProcessedResource],
                 values: Dict[str, Any], external_files: ExternalFileManager, output_dir: Path):
        self.config = config
        self.chart_name = config['chart']['name']
        self.processed = processed
        self.values = values
        self.external_files = external_files
        self.output_dir = output_dir
        self.templates_dir = output_dir / 'templates'

    def generate(self):
        """Generate all Helm chart files"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.templates_dir.mkdir(parents=True, exist_ok=True)

        self._write(self.output_dir / 'Chart.yaml', dump_yaml(self._build_chart_yaml()))
        self._write(self.output_dir / 'values.yaml', self._build_values_yaml())
        self._write(self.templates_dir / '_helpers.tpl', self._build_helpers())
        self._write(self.templates_dir / 'NOTES.txt', self._build_notes())

        for item in self.processed:
            self._write(self.output_dir / item.result.template_path, item.result.template_content)

        # sorted so the on-disk listing is reproducible
        for file in self.external_files.sorted_files():
            self._write(self.output_dir / file.path, file.content)

    def show_plan(self):
        """Show what would be generated (dry run)"""
        print("  Would generate Chart.yaml")
        print("  Would generate values.yaml")
        print("  Would generate templates/_helpers.tpl")
        print("  Would generate templates/NOTES.txt")

        for item in self.processed:
            print(f"  Would generate {item.result.template_path} ({item.key})")

        for file in self.external_files.sorted_files():
            print(f"  Would generate {file.path} ({file.source_resource} [{file.source_key}], {file.data_type.value})")

        print("\n  Sample values structure:")
        print_keys(self.values, indent=4)

        suggestion = self.external_files.suggest_values_structure()
        if suggestion:
            print("\n  External files:")
            print_keys(suggestion, indent=4)

    def _write(self, path: Path, content: str):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            f.write(content)

    def _build_chart_yaml(self) -> Dict[str, Any]:
        chart = self.config['chart']
        return {
            'apiVersion': 'v2',
            'name': self.chart_name,
            'description': chart['description'],
            'type': 'application',
            'version': chart['version'],
            'appVersion': str(chart['appVersion']),
        }

    def _build_values_yaml(self) -> str:
        header = generate_header(self.chart_name, self.config['chart']['description'])
        if not self.values:
            return header + '{}\n'
        return header + dump_yaml(self.values)

    def _build_helpers(self) -> str:
        chart = self.chart_name
        helpers = f'''{{{{/*
Expand the name of the chart.
*/}}}}
{{{{- define "{chart}.name" -}}}}
{{{{- default .Chart.Name .Values.nameOverride | trunc 63 | trimSuffix "-" }}}}
{{{{- end }}}}

{{{{/*
Create a default fully qualified app name.
*/}}}}
{{{{- define "{chart}.fullname" -}}}}
{{{{- if .Values.fullnameOverride }}}}
{{{{- .Values.fullnameOverride | trunc 63 | trimSuffix "-" }}}}
{{{{- else }}}}
{{{{- $name := default .Chart.Name .Values.nameOverride }}}}
{{{{- if contains $name .Release.Name }}}}
{{{{- .Release.Name | trunc 63 | trimSuffix "-" }}}}
{{{{- else }}}}
{{{{- printf "%s-%s" .Release.Name $name | trunc 63 | trimSuffix "-" }}}}
{{{{- end }}}}
{{{{- end }}}}
{{{{- end }}}}

{{{{/*
Common labels
*/}}}}
{{{{- define "{chart}.labels" -}}}}
helm.sh/chart: {{{{ printf "%s-%s" .Chart.Name .Chart.Version | replace "+" "_" | trunc 63 | trimSuffix "-" }}}}
app.kubernetes.io/name: {{{{ include "{chart}.name" . }}}}
app.kubernetes.io/instance: {{{{ .Release.Name }}}}
app.kubernetes.io/managed-by: {{{{ .Release.Service }}}}
{{{{- end }}}}

{{{{/*
Render a list of container values
*/}}}}
{{{{- define "{chart}.containers" -}}}}
{{{{- range . }}}}
{{{{- $container := . }}}}
- name: {{{{ .name }}}}
  image: "{{{{ .image.repository }}}}{{{{ if .image.tag }}}}{{{{ if hasPrefix "@" .image.tag }}}}{{{{ .image.tag }}}}{{{{ else }}}}:{{{{ .image.tag }}}}{{{{ end }}}}{{{{ end }}}}"
  {{{{- with .imagePullPolicy }}}}
  imagePullPolicy: {{{{ . }}}}
  {{{{- end }}}}
  {{{{- range $field := list "command" "args" "ports" "env" "envFrom" "resources" "volumeMounts" "livenessProbe" "readinessProbe" "startupProbe" "securityContext" }}}}
  {{{{- with index $container $field }}}}
  {{{{ $field }}}}:
    {{{{- toYaml . | nindent 4 }}}}
  {{{{- end }}}}
  {{{{- end }}}}
{{{{- end }}}}
{{{{- end }}}}

'''
        return helpers + self.external_files.generate_helm_helper(chart)

    def _build_notes(self) -> str:
        lines = [
            f'{self.chart_name} has been installed as release {{{{ .Release.Name }}}}',
            'in namespace {{ .Release.Namespace }}.',
            '',
            f'Generated from {len(self.processed)} resources.',
        ]
        if len(self.external_files):
            lines.append(f'{len(self.external_files)} values are stored under files/.')
        return '\n'.join(lines) + '\n'
