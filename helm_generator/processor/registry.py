"""
Processor Registry Module

Holds processors by resource type and dispatches each resource to the
highest-priority processor that accepts it.
"""

import dataclasses
from typing import Any, Dict, List, Optional

from ..resource import (
    ResourceTypeKey,
    describe_resource,
    get_annotations,
    get_labels,
    get_name,
    get_namespace,
    type_key_of,
    validate_resource,
)
from ..errors import ProcessorError
from ..value.external import escape_template_string
from .base import (
    BaseProcessor,
    Context,
    Result,
    sanitize_name,
    service_name_from_resource,
    template_path_for_resource,
    values_path_for_kind,
)
from .dependencies import dedupe_dependencies


class ProcessorRegistry:
    """Priority-ordered registry of resource processors.

    Build one per generation run, register every processor up front, then
    treat it as read-only. Processors for the same type are kept ordered by
    priority (highest first); equal priorities keep registration order.
    """

    def __init__(self):
        self._processors: List[BaseProcessor] = []
        self._by_type: Dict[ResourceTypeKey, List[BaseProcessor]] = {}

    def register(self, processor: BaseProcessor) -> None:
        """Add a processor for every type it supports"""
        self._processors.append(processor)
        for type_key in processor.supports():
            candidates = self._by_type.setdefault(type_key, [])
            candidates.append(processor)
            # sort is stable, so ties stay in registration order
            candidates.sort(key=lambda p: p.priority, reverse=True)

    def get_processors(self, type_key: ResourceTypeKey) -> List[BaseProcessor]:
        """All processors for a type, highest priority first"""
        return list(self._by_type.get(type_key, []))

    def get_processor(self, type_key: ResourceTypeKey) -> Optional[BaseProcessor]:
        candidates = self._by_type.get(type_key)
        return candidates[0] if candidates else None

    def all(self) -> List[BaseProcessor]:
        return list(self._processors)

    def supported_types(self) -> List[ResourceTypeKey]:
        return list(self._by_type.keys())

    def dispatch(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        """Run the first processor that accepts the resource.

        Candidates are tried in priority order. A processor declines by
        returning None or a Result with processed=False; the next one is
        then tried. Exactly one processor's Result is returned.

        Args:
            ctx: Run context
            obj: Decoded manifest document

        Returns:
            The winning Result with deduplicated dependencies, or None if no
            processor accepted the resource

        Raises:
            InvalidResourceError: If the document is malformed
            ProcessorError: If a processor raised; lower-priority processors
                are not tried
        """
        validate_resource(obj)

        for processor in self._by_type.get(type_key_of(obj), []):
            try:
                result = processor.process(ctx, obj)
            except Exception as e:
                raise ProcessorError(processor.name, describe_resource(obj), e) from e

            if result is None or not result.processed:
                continue

            return dataclasses.replace(
                result,
                dependencies=dedupe_dependencies(result.dependencies),
            )

        return None

    def process(self, ctx: Context, obj: Dict[str, Any]) -> Result:
        """Dispatch, falling back to a generic template for unhandled resources"""
        result = self.dispatch(ctx, obj)
        if result is not None:
            return result
        return process_generic(ctx, obj)


def _quoted(value: Any) -> str:
    """Double-quoted YAML scalar; booleans keep their YAML spelling"""
    text = str(value).lower() if isinstance(value, bool) else str(value)
    return f'"{escape_template_string(text)}"'


def process_generic(ctx: Context, obj: Dict[str, Any]) -> Result:
    """Template any resource by moving its spec into values.yaml as-is"""
    kind = obj['kind']
    name = get_name(obj)
    service_name = sanitize_name(service_name_from_resource(obj))
    values_path = values_path_for_kind(kind, service_name)

    lines = [
        f'{{{{- if (.Values.{values_path}.enabled | default true) }}}}',
        f"apiVersion: {obj['apiVersion']}",
        f'kind: {kind}',
        'metadata:',
        f'  name: {{{{ include "{ctx.chart_name}.fullname" . }}}}-{name}',
    ]
    if get_namespace(obj):
        lines.append('  namespace: {{ .Release.Namespace }}')

    lines.append('  labels:')
    lines.append(f'    {{{{- include "{ctx.chart_name}.labels" . | nindent 4 }}}}')
    for key, value in get_labels(obj).items():
        lines.append(f'    {key}: {_quoted(value)}')

    annotations = get_annotations(obj)
    if annotations:
        lines.append('  annotations:')
        for key, value in annotations.items():
            lines.append(f'    {key}: {_quoted(value)}')

    values = {'enabled': True}
    spec = obj.get('spec')
    if spec is not None:
        lines.append('spec:')
        lines.append(f'  {{{{- toYaml .Values.{values_path}.spec | nindent 2 }}}}')
        values['spec'] = spec

    lines.append('{{- end }}')

    return Result(
        processed=True,
        service_name=service_name,
        template_path=template_path_for_resource(kind, name),
        template_content='\n'.join(lines) + '\n',
        values_path=values_path,
        values=values,
        metadata={'name': name, 'namespace': get_namespace(obj), 'generic': True},
    )
