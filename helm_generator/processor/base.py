"""
Processor Base Module

Interface shared by all resource processors, the per-resource Result they
return, and naming helpers for service names, values paths and template paths.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import KIND_FILE_NAMES, KIND_VALUES_KEYS, SERVICE_NAME_LABELS
from ..resource import ResourceKey, ResourceTypeKey, get_labels, get_name
from ..value import ExternalFile, ExternalFileManager, ValueProcessor


@dataclass
class Context:
    """Run-wide state handed to every processor"""

    chart_name: str
    value_processor: Optional[ValueProcessor] = None
    external_file_manager: Optional[ExternalFileManager] = None
    all_resources: Dict[ResourceKey, Dict[str, Any]] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Result:
    """Output of processing one resource"""

    processed: bool
    service_name: str = ''
    template_path: str = ''
    template_content: str = ''
    values_path: str = ''
    values: Dict[str, Any] = field(default_factory=dict)
    dependencies: List[ResourceKey] = field(default_factory=list)
    external_files: List[ExternalFile] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


NOT_PROCESSED = Result(processed=False)


class BaseProcessor(ABC):
    """Base class for resource processors.

    Subclasses declare the resource types they handle and a priority; when
    several processors support one type, higher priority is tried first.
    process() returns a Result with processed=True to claim the resource, or
    None / NOT_PROCESSED to let the next processor try. Raising stops
    dispatch for that resource.
    """

    def __init__(self, name: str, priority: int, *type_keys: ResourceTypeKey):
        self._name = name
        self._priority = priority
        self._type_keys = list(type_keys)

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    def supports(self) -> List[ResourceTypeKey]:
        return list(self._type_keys)

    @abstractmethod
    def process(self, ctx: Context, obj: Dict[str, Any]) -> Optional[Result]:
        """Process a resource document.

        Args:
            ctx: Run context
            obj: Decoded manifest document

        Returns:
            Result for the resource, or None/NOT_PROCESSED to decline
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, priority={self._priority})"


def service_name_from_labels(obj: Dict[str, Any]) -> str:
    """Service name from the first well-known label present"""
    labels = get_labels(obj)
    for label in SERVICE_NAME_LABELS:
        value = labels.get(label)
        if value:
            return str(value)
    return ''


def service_name_from_resource(obj: Dict[str, Any]) -> str:
    return service_name_from_labels(obj) or get_name(obj)


def sanitize_name(name: str) -> str:
    """Convert a Kubernetes name to a camelCase values key.

    'test-module' -> 'testModule', 'App.Config' -> 'appConfig'
    """
    if not name:
        return name
    parts = [part for part in re.split(r'[-_.]+', name) if part]
    if not parts:
        return name
    first = parts[0][0].lower() + parts[0][1:]
    return first + ''.join(part[0].upper() + part[1:] for part in parts[1:])


def kind_to_values_key(kind: str) -> str:
    if kind in KIND_VALUES_KEYS:
        return KIND_VALUES_KEYS[kind]
    return kind[:1].lower() + kind[1:]


def kind_to_file_name(kind: str) -> str:
    return KIND_FILE_NAMES.get(kind, kind.lower())


def values_path_for_kind(kind: str, service_name: str) -> str:
    """Standard values.yaml path, e.g. 'services.myApp.deployment'"""
    values_key = kind_to_values_key(kind)
    if not service_name:
        return values_key
    return f"services.{service_name}.{values_key}"


def template_path_for_resource(kind: str, name: str) -> str:
    return f"templates/{kind_to_file_name(kind)}-{name}.yaml"


def source_resource_id(obj: Dict[str, Any]) -> str:
    """Identifier used for external file paths: 'Kind/namespace/name'"""
    metadata = obj.get('metadata') or {}
    return f"{obj.get('kind', '')}/{metadata.get('namespace') or ''}/{metadata.get('name') or ''}"
