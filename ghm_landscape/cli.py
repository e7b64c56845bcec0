#!/usr/bin/env python3
"""
Command-line interface for the gHM landscape workflow.

Thin wrapper that merges command-line overrides into the YAML configuration
and runs the workflow.

Usage:
    ghm-landscape --boundary counties.shp --project my-ee-project
    ghm-landscape --config config.yaml --batch --name-field NAME --output results.csv
"""

import argparse
import sys

from .config import deep_merge, load_config, validate_config
from .logging_utils import setup_logging
from .workflow import run_workflow


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Human modification (gHM) zonal statistics and landscape metrics from Google Earth Engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--config', type=str, help='Path to a YAML configuration file')
    parser.add_argument('--project', type=str, help='Earth Engine cloud project ID')
    parser.add_argument('--authenticate', action='store_true',
                        help='Run the Earth Engine authentication flow before initialising')
    parser.add_argument('--boundary', type=str, help='Vector file with the administrative boundary')
    parser.add_argument('--name-field', type=str, help='Boundary attribute holding region names')
    parser.add_argument('--names', nargs='+', help='Only keep boundary features with these names')
    parser.add_argument('--batch', action='store_true',
                        help='Process each boundary feature separately instead of the dissolved area')
    parser.add_argument('--scale', type=float, help='Pixel scale in metres for Earth Engine requests')
    parser.add_argument('--fetch-method', choices=['pixels', 'geotiff'],
                        help='How pixels are brought into local memory')
    parser.add_argument('--output', type=str, help='CSV file for the region summaries')
    parser.add_argument('--save-raster', type=str, metavar='DIR',
                        help='Directory to write the gHM and class rasters to')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    parser.add_argument('--log-file', type=str, help='Optional log file')

    return parser.parse_args(argv)


def build_config(args):
    """Load the configuration file and apply command-line overrides."""
    config = load_config(args.config)

    overrides = {
        'earth_engine': {'project': args.project, 'authenticate': args.authenticate or None},
        'boundary': {
            'path': args.boundary,
            'name_field': args.name_field,
            'names': args.names,
            'batch': args.batch or None,
        },
        'processing': {'scale': args.scale, 'fetch_method': args.fetch_method},
        'output': {'results_csv': args.output, 'raster_dir': args.save_raster},
    }
    # Only options actually given on the command line override the file
    overrides = {
        section: {key: value for key, value in values.items() if value is not None}
        for section, values in overrides.items()
    }
    deep_merge(config, overrides)
    validate_config(config)
    return config


def main(argv=None):
    """Main entry point for the gHM landscape workflow."""
    args = parse_arguments(argv)
    logger = setup_logging(args.log_level, 'cli', log_file=args.log_file)

    try:
        config = build_config(args)
        result_df = run_workflow(config)
    except Exception as e:
        logger.error(f"Workflow failed: {e}")
        return 1

    if result_df.empty:
        logger.error("No region could be processed")
        return 1

    print(result_df.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
