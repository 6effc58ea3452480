"""
Command-line entry point: Kubernetes manifests to Helm chart.
"""

import argparse
import sys
from pathlib import Path

from .chart_generator import ChartGenerator
from .config import load_config
from .errors import GeneratorError
from .generator import Generator
from .logger import log_error, log_info, log_success, log_warning
from .manifest_reader import ManifestReader


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Convert Kubernetes manifests to a Helm chart"
    )
    parser.add_argument(
        "--input",
        required=True,
        action="append",
        help="Manifest file or directory (repeatable)",
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Output directory for the generated Helm chart",
    )
    parser.add_argument(
        "--chart-name",
        help="Chart name (overrides chart.name from the config file)",
    )
    parser.add_argument(
        "--config",
        help="Path to a generator configuration YAML file",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force overwrite if output directory exists",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode - show what would be generated without creating files",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    output_dir = Path(args.output).resolve()

    if output_dir.exists() and not args.force and not args.dry_run:
        log_error(f"Output directory already exists: {output_dir}")
        log_error("Use --force to overwrite or choose a different output directory")
        return 1

    overrides = {'chart': {'name': args.chart_name}} if args.chart_name else None

    try:
        log_info("[1/4] Loading configuration...")
        config = load_config(Path(args.config) if args.config else None, overrides)
        log_info(f"  Chart: {config['chart']['name']}")

        log_info("[2/4] Reading Kubernetes manifests...")
        documents = ManifestReader(args.input).read_manifests()
        log_info(f"  Read {len(documents)} resources")

        log_info("[3/4] Processing resources...")
        generator = Generator(config)
        processed = generator.process_all(documents)
        for source, targets in generator.missing_dependencies(processed).items():
            log_warning(f"  {source} references resources not in the input: {', '.join(map(str, targets))}")
        values = generator.build_values(processed)

        log_info("[4/4] Writing chart...")
        chart_gen = ChartGenerator(config, processed, values, generator.external_files, output_dir)
        if args.dry_run:
            log_info("  (Dry run mode - not creating files)")
            chart_gen.show_plan()
        else:
            chart_gen.generate()
            log_success(f"Generated Helm chart in {output_dir}")

    except (GeneratorError, OSError, ValueError) as e:
        log_error(f"Error during conversion: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
