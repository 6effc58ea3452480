"""
Manifest Reader Module

Reads Kubernetes manifests from YAML files and directories.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

MANIFEST_SUFFIXES = ('.yaml', '.yml', '.json')


class ManifestReader:
    """Reads multi-document YAML manifests"""

    def __init__(self, paths: Iterable[Path]):
        self.paths = [Path(p) for p in paths]

    def manifest_files(self) -> List[Path]:
        """Expand directories into their manifest files, sorted by path"""
        files = []
        for path in self.paths:
            if path.is_dir():
                files.extend(sorted(
                    p for p in path.rglob('*') if p.is_file() and p.suffix in MANIFEST_SUFFIXES
                ))
            elif path.is_file():
                files.append(path)
            else:
                raise FileNotFoundError(f"Manifest path not found: {path}")
        return files

    def read_manifests(self) -> List[Dict[str, Any]]:
        """Read every document from every manifest file

        Empty documents are skipped and `kind: List` documents are flattened
        into their items.

        Returns:
            List of resource documents in file order
        """
        documents = []
        for manifest_file in self.manifest_files():
            with open(manifest_file) as f:
                for doc in yaml.safe_load_all(f):
                    documents.extend(self._flatten(doc))
        return documents

    def _flatten(self, doc: Any) -> List[Any]:
        if doc is None:
            return []
        if isinstance(doc, dict) and doc.get('kind') == 'List' and isinstance(doc.get('items'), list):
            flattened = []
            for item in doc['items']:
                flattened.extend(self._flatten(item))
            return flattened
        return [doc]
