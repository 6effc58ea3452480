#!/usr/bin/env python3
"""
Kubernetes manifests to Helm Chart Converter

Converts Kubernetes manifests into a Helm chart: templates, values.yaml and
files/ for large values.

Usage:
    python convert.py --input manifests/ --output charts/myapp
    python convert.py --input app.yaml --input db.yaml --output charts/myapp --chart-name myapp

Arguments:
    --input: Manifest file or directory (repeatable)
    --output: Output directory for the generated Helm chart (will not overwrite if exists)
    --chart-name: Chart name
    --config: Generator configuration YAML
    --force: Force overwrite if output directory exists
    --dry-run: Show the plan without writing files
"""

import sys

from helm_generator.cli import main


if __name__ == "__main__":
    sys.exit(main())
