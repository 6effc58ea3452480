"""
Errors raised while converting manifests into a chart.
"""


class GeneratorError(Exception):
    """Base class for helm-generator errors"""


class ConfigError(GeneratorError):
    """Invalid configuration value"""


class InvalidResourceError(GeneratorError):
    """Document is not a usable Kubernetes resource"""


class ProcessorError(GeneratorError):
    """A processor failed while handling a resource"""

    def __init__(self, processor_name: str, resource: str, cause: Exception):
        self.processor_name = processor_name
        self.resource = resource
        self.cause = cause
        super().__init__(f"processor '{processor_name}' failed on {resource}: {cause}")


class PathConflictError(GeneratorError):
    """Two external files claim the same path with different content"""

    def __init__(self, path: str, existing, conflicting):
        self.path = path
        self.existing = existing
        self.conflicting = conflicting
        super().__init__(
            f"path conflict: {path} already holds {existing.source_resource} "
            f"[{existing.source_key}], cannot add {conflicting.source_resource} "
            f"[{conflicting.source_key}] with different content"
        )
