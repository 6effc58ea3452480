"""
Resource Identity Module

Identity keys for resource types and resource instances, plus accessors for
decoded manifest documents.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .constants import MAX_SAFE_FLOAT_INTEGER
from .errors import InvalidResourceError

# Payload of a decoded YAML/JSON document
Value = Union[None, bool, int, float, str, List['Value'], Dict[str, 'Value']]


@dataclass(frozen=True)
class ResourceTypeKey:
    """Identifies a resource type (group/version/kind)"""

    group: str
    version: str
    kind: str

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> 'ResourceTypeKey':
        """Build a key from an apiVersion string ('apps/v1' or core 'v1')"""
        if '/' in api_version:
            group, version = api_version.split('/', 1)
        else:
            group, version = '', api_version
        return cls(group=group, version=version, kind=kind)

    @property
    def api_version(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


@dataclass(frozen=True)
class ResourceKey:
    """Identifies one resource instance

    Used as a dependency edge endpoint and as a map key. Namespace is empty
    for cluster-scoped resources.
    """

    group: str
    version: str
    kind: str
    namespace: str
    name: str

    @property
    def type_key(self) -> ResourceTypeKey:
        return ResourceTypeKey(self.group, self.version, self.kind)

    def __str__(self) -> str:
        if not self.namespace:
            return f"{self.kind}/{self.name}"
        return f"{self.kind}/{self.namespace}/{self.name}"


def validate_resource(obj: Any) -> None:
    """Check that a document carries the fields every processor relies on.

    Args:
        obj: Decoded manifest document

    Raises:
        InvalidResourceError: If the document cannot be dispatched
    """
    if obj is None:
        raise InvalidResourceError("resource document is empty")
    if not isinstance(obj, dict):
        raise InvalidResourceError(f"resource document must be a mapping, got {type(obj).__name__}")

    for field in ('apiVersion', 'kind'):
        value = obj.get(field)
        if not isinstance(value, str) or not value:
            raise InvalidResourceError(f"resource document has no valid '{field}'")

    metadata = obj.get('metadata', {})
    if metadata is not None and not isinstance(metadata, dict):
        raise InvalidResourceError(
            f"{obj['kind']} metadata must be a mapping, got {type(metadata).__name__}"
        )


def get_metadata(obj: Dict[str, Any]) -> Dict[str, Any]:
    return obj.get('metadata') or {}


def get_name(obj: Dict[str, Any]) -> str:
    return get_metadata(obj).get('name') or ''


def get_namespace(obj: Dict[str, Any]) -> str:
    return get_metadata(obj).get('namespace') or ''


def get_labels(obj: Dict[str, Any]) -> Dict[str, str]:
    return get_metadata(obj).get('labels') or {}


def get_annotations(obj: Dict[str, Any]) -> Dict[str, str]:
    return get_metadata(obj).get('annotations') or {}


def type_key_of(obj: Dict[str, Any]) -> ResourceTypeKey:
    return ResourceTypeKey.from_api_version(obj['apiVersion'], obj['kind'])


def resource_key_of(obj: Dict[str, Any]) -> ResourceKey:
    type_key = type_key_of(obj)
    return ResourceKey(
        group=type_key.group,
        version=type_key.version,
        kind=type_key.kind,
        namespace=get_namespace(obj),
        name=get_name(obj),
    )


def describe_resource(obj: Any) -> str:
    """Human-readable identity for error messages, tolerant of bad input"""
    if not isinstance(obj, dict):
        return repr(obj)
    kind = obj.get('kind') or '<unknown kind>'
    metadata = obj.get('metadata') if isinstance(obj.get('metadata'), dict) else {}
    name = metadata.get('name') or '<unnamed>'
    namespace = metadata.get('namespace')
    if namespace:
        return f"{kind}/{namespace}/{name}"
    return f"{kind}/{name}"


def nested_get(obj: Dict[str, Any], *fields: str) -> Optional[Value]:
    """Walk nested mappings, returning None if any level is missing"""
    current = obj
    for field in fields:
        if not isinstance(current, dict) or field not in current:
            return None
        current = current[field]
    return current


def nested_int(obj: Dict[str, Any], *fields: str) -> Optional[int]:
    """Read an integer-only field.

    JSON decoders may hand integers back as floats. A float is accepted only
    when it is integral and within the range a float represents exactly;
    anything else is rejected rather than truncated.

    Args:
        obj: Document to read from
        *fields: Path to the field

    Returns:
        The integer value, or None if the field is absent

    Raises:
        ValueError: If the field holds a non-integer value
    """
    raw = nested_get(obj, *fields)
    path = '.'.join(fields)
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{path}: expected integer, got boolean {raw}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"{path}: expected integer, got fractional value {raw}")
        if abs(raw) > MAX_SAFE_FLOAT_INTEGER:
            raise ValueError(f"{path}: {raw} is outside the exactly representable integer range")
        return int(raw)
    raise ValueError(f"{path}: expected integer, got {type(raw).__name__}")
