"""
Generator Module

Runs every resource of a generation run through the processor registry and
collects results, values and external files.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .logger import log_info, log_warning
from .processor import Context, ProcessorRegistry, Result, process_generic
from .processor.k8s import default_registry
from .resource import ResourceKey, resource_key_of, validate_resource
from .value import ExternalFileManager, ValueProcessor


@dataclass
class ProcessedResource:
    """A resource together with the result of processing it"""

    key: ResourceKey
    result: Result
    generic: bool = False


def set_values_path(values: Dict[str, Any], dotted_path: str, value: Dict[str, Any]) -> None:
    """Merge value into values at a dotted path, creating parents as needed"""
    parts = dotted_path.split('.')
    current = values
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    existing = current.get(parts[-1])
    if isinstance(existing, dict) and isinstance(value, dict):
        existing.update(value)
    else:
        current[parts[-1]] = value


class Generator:
    """Processes all resources of one generation run"""

    def __init__(self, config: Dict[str, Any], registry: Optional[ProcessorRegistry] = None):
        """Initialize Generator

        Args:
            config: Loaded configuration (see config.load_config)
            registry: Processor registry; the built-in processors when omitted
        """
        self.config = config
        self.registry = registry if registry is not None else default_registry()
        self.external_files = ExternalFileManager()
        self.value_processor = ValueProcessor(
            size_threshold=config['valueProcessor']['sizeThreshold'],
            pretty_print=config['valueProcessor']['prettyPrint'],
            files_dir=config['externalFiles']['directory'],
        )
        self.context = Context(
            chart_name=config['chart']['name'],
            value_processor=self.value_processor,
            external_file_manager=self.external_files,
        )

    def process_all(self, documents: List[Dict[str, Any]]) -> List[ProcessedResource]:
        """Process every document.

        Resources no processor accepts get the generic template. Processing
        stops at the first error.

        Args:
            documents: Decoded manifest documents

        Returns:
            One ProcessedResource per document, in input order
        """
        for doc in documents:
            validate_resource(doc)
            self.context.all_resources[resource_key_of(doc)] = doc

        processed = []
        for doc in documents:
            key = resource_key_of(doc)
            result = self.registry.dispatch(self.context, doc)
            if result is None:
                log_warning(f"No processor accepted {key}, using generic template")
                processed.append(ProcessedResource(key, process_generic(self.context, doc), generic=True))
                continue
            processed.append(ProcessedResource(key, result))

        log_info(f"Processed {len(processed)} resources, externalized {len(self.external_files)} values")
        return processed

    def missing_dependencies(self, processed: List[ProcessedResource]) -> Dict[ResourceKey, List[ResourceKey]]:
        """Dependency edges whose target is not among the input resources"""
        missing = {}
        for item in processed:
            targets = [dep for dep in item.result.dependencies if dep not in self.context.all_resources]
            if targets:
                missing[item.key] = targets
        return missing

    def build_values(self, processed: List[ProcessedResource]) -> Dict[str, Any]:
        """Merge every result's values into one values tree"""
        values: Dict[str, Any] = {}
        for item in processed:
            result = item.result
            if result.service_name:
                set_values_path(values, f"services.{result.service_name}", {'enabled': True})
            if result.values_path:
                set_values_path(values, result.values_path, dict(result.values))
        return values
