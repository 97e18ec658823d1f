"""
DMARC Analyzer Command-Line Interface

This module provides the command-line interface for the DMARC Analyzer,
handling argument parsing, logging setup and the main program flow.
"""

import argparse
import logging
import os
import sys

from dmarc_analyzer.analysis.analyzer import analyze_reports
from dmarc_analyzer.config import load_config
from dmarc_analyzer.parsers.dmarc_parser import load_reports
from dmarc_analyzer.policy.lookup import lookup_domain_auth_records
from dmarc_analyzer.reporting.html_report import generate_html_report
from dmarc_analyzer.reporting.text_report import generate_text_report

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Analyze DMARC aggregate reports in a directory')
    parser.add_argument('reports_dir', nargs='?', default=None,
                        help='Directory containing DMARC reports (default: ./reports)')
    parser.add_argument('--output', '-o', help='HTML output file (default: ./dmarc-report.html)')
    parser.add_argument('--template', help='HTML template file with report placeholders')
    parser.add_argument('--no-dns', action='store_true', help='Skip SPF/DKIM/DMARC DNS lookups')
    parser.add_argument('--no-chart', action='store_true', help='Leave out the pass rate trend chart')
    parser.add_argument('--no-sort', action='store_true', help='Process files in directory order')
    parser.add_argument('--text', action='store_true', help='Also print a text summary to stdout')
    parser.add_argument('--resolve-ips', '-r', action='store_true',
                        help='Resolve failing source IPs to hostnames in the text summary')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        type=str.upper, help='Logging level (default: INFO)')
    return parser.parse_args(argv)


def setup_logging(level, environ=None):
    """Configure root logging; SUPPRESS_CONSOLE_LOGGING=true hides everything below CRITICAL."""
    if environ is None:
        environ = os.environ
    if environ.get('SUPPRESS_CONSOLE_LOGGING', '').lower() == 'true':
        level = 'CRITICAL'
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def main(argv=None):
    """Main function to process DMARC reports."""
    args = parse_args(argv)
    config = load_config(args)
    setup_logging(config.log_level)

    if not os.path.isdir(config.reports_dir):
        print(f"Error: {config.reports_dir} is not a valid directory", file=sys.stderr)
        sys.exit(1)

    reports = load_reports(config.reports_dir, sort_by_timestamp=config.sort_by_timestamp)
    if not reports:
        print("No valid DMARC reports were successfully parsed.", file=sys.stderr)
        sys.exit(1)

    logger.info("Analyzing %d valid reports", len(reports))
    lookup = lookup_domain_auth_records if config.enable_dns_lookups else None
    analysis = analyze_reports(reports, lookup=lookup)

    template = None
    if config.template_path:
        with open(config.template_path, 'r', encoding='utf-8') as f:
            template = f.read()

    html_report = generate_html_report(
        analysis,
        include_chart=config.include_chart,
        dns_lookups_enabled=config.enable_dns_lookups,
        template=template,
    )
    with open(config.output_path, 'w', encoding='utf-8') as f:
        f.write(html_report)
    logger.info("HTML report written to %s", config.output_path)

    if args.text:
        print(generate_text_report(analysis, resolve_ips=args.resolve_ips))


if __name__ == "__main__":
    main()
