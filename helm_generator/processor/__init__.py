"""
Resource processor package

Priority-ordered processors that turn Kubernetes resources into chart
templates, values and dependency edges.
"""
from .base import (
    NOT_PROCESSED,
    BaseProcessor,
    Context,
    Result,
    sanitize_name,
    service_name_from_resource,
    source_resource_id,
    template_path_for_resource,
    values_path_for_kind,
)
from .dependencies import (
    dedupe_dependencies,
    env_dependencies,
    env_from_dependencies,
    pod_spec_dependencies,
    reference,
    volume_dependencies,
)
from .registry import ProcessorRegistry, process_generic

__all__ = [
    'NOT_PROCESSED',
    'BaseProcessor',
    'Context',
    'Result',
    'sanitize_name',
    'service_name_from_resource',
    'source_resource_id',
    'template_path_for_resource',
    'values_path_for_kind',
    'dedupe_dependencies',
    'env_dependencies',
    'env_from_dependencies',
    'pod_spec_dependencies',
    'reference',
    'volume_dependencies',
    'ProcessorRegistry',
    'process_generic',
]
