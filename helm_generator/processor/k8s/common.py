"""
Shared helpers for Kubernetes processors
"""

from typing import Any, Dict, List, Optional, Tuple

from ..base import Context
from ...value import ExternalFile


def process_data_map(
        ctx: Context,
        source_resource: str,
        data: Dict[str, Any],
        extra_ref_fields: Optional[Dict[str, Any]] = None
) -> Tuple[Dict[str, Any], List[ExternalFile]]:
    """Run every entry of a data map through the value processor

    Values at or above the size threshold are stored in the external file manager
    and replaced by a reference entry; the rest stay inline (pretty-printed
    when structured).

    Args:
        ctx: Run context (value processor and external file manager may be None)
        source_resource: Identity of the resource owning the map
        data: Key -> string value map (e.g. ConfigMap data)
        extra_ref_fields: Extra fields added to each external reference entry

    Returns:
        Tuple of (values map, external files created)

    Raises:
        PathConflictError: If an external path already holds different content
    """
    if ctx.value_processor is None or ctx.external_file_manager is None:
        return dict(data), []

    values = {}
    external_files = []

    for key, raw in data.items():
        processed = ctx.value_processor.process(source_resource, key, str(raw))
        if not processed.externalize:
            values[key] = processed.formatted_value
            continue

        file = ctx.external_file_manager.add_from_processed(source_resource, key, processed)
        external_files.append(file)
        values[key] = {
            '_externalFile': file.path,
            '_checksum': file.checksum,
            '_type': file.data_type.value,
            **(extra_ref_fields or {}),
        }

    return values, external_files
