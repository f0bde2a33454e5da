"""
Timeline & Workload Analysis
============================

Command line entry point running the sample project.
"""

import argparse
import logging
import sys

from .examples.simple_project import create_sample_project
from .utils.config import ConfigError, load_config


def main(argv=None):
    parser = argparse.ArgumentParser(description="Timeline & Workload Analysis Engine")
    parser.add_argument(
        "--example", action="store_true", help="Run the example project"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="workload_heatmap.png",
        help="Output filename for the workload heatmap",
    )
    parser.add_argument(
        "--config", type=str, default=None, help="YAML or JSON configuration file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log the analysis at debug level"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.example:
        parser.print_help()
        return 1

    config = None
    if args.config:
        try:
            config = load_config(args.config)
        except ConfigError as e:
            logging.getLogger(__name__).error("%s", e)
            return 2

    print("Running example project...")
    create_sample_project(args.output, show=False, config=config)
    print(f"Visualization saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
