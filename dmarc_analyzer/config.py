"""
Configuration for the DMARC Analyzer.

Settings come from command-line arguments, then DMARC_* environment
variables, then a .env file in the working directory, then the defaults below.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import dotenv_values

DEFAULT_REPORTS_DIR = './reports'
DEFAULT_OUTPUT_PATH = './dmarc-report.html'
DEFAULT_LOG_LEVEL = 'INFO'
DEFAULT_ENV_FILE = '.env'

ENV_REPORTS_DIR = 'DMARC_REPORTS_DIR'
ENV_OUTPUT_PATH = 'DMARC_OUTPUT_PATH'
ENV_HTML_TEMPLATE = 'DMARC_HTML_TEMPLATE'
ENV_SORT_BY_TIMESTAMP = 'DMARC_SORT_BY_TIMESTAMP'
ENV_INCLUDE_CHART = 'DMARC_INCLUDE_CHART'
ENV_ENABLE_DNS_LOOKUPS = 'DMARC_ENABLE_DNS_LOOKUPS'
ENV_LOG_LEVEL = 'DMARC_LOG_LEVEL'


@dataclass(frozen=True)
class AnalyzerConfig:
    reports_dir: str = DEFAULT_REPORTS_DIR
    output_path: str = DEFAULT_OUTPUT_PATH
    template_path: Optional[str] = None  # None selects the built-in template
    sort_by_timestamp: bool = True
    include_chart: bool = True
    enable_dns_lookups: bool = True
    log_level: str = DEFAULT_LOG_LEVEL


def env_flag(environ, name, default=True):
    """A boolean variable is false only when set to 'false'."""
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() != 'false'


def read_env_file(path):
    """Variables assigned in a dotenv file; empty when the file does not exist."""
    if path is None or not os.path.isfile(path):
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def load_config(args=None, environ=None, env_file=DEFAULT_ENV_FILE):
    """
    Build the effective configuration.

    Args:
        args: argparse.Namespace from parse_args; attributes left as None
            (or False for the --no-* switches) fall through to the environment
        environ: Mapping of environment variables (default: os.environ)
        env_file: dotenv file whose variables apply where environ has none;
            None disables it

    Returns:
        AnalyzerConfig
    """
    if environ is None:
        environ = os.environ
    environ = {**read_env_file(env_file), **environ}

    def pick(attr, env_name, default):
        value = getattr(args, attr, None) if args is not None else None
        if value is not None:
            return value
        return environ.get(env_name) or default

    def switch(attr, env_name):
        # --no-* switches can only turn a setting off
        if args is not None and getattr(args, attr, False):
            return False
        return env_flag(environ, env_name)

    return AnalyzerConfig(
        reports_dir=pick('reports_dir', ENV_REPORTS_DIR, DEFAULT_REPORTS_DIR),
        output_path=pick('output', ENV_OUTPUT_PATH, DEFAULT_OUTPUT_PATH),
        template_path=pick('template', ENV_HTML_TEMPLATE, None),
        sort_by_timestamp=switch('no_sort', ENV_SORT_BY_TIMESTAMP),
        include_chart=switch('no_chart', ENV_INCLUDE_CHART),
        enable_dns_lookups=switch('no_dns', ENV_ENABLE_DNS_LOOKUPS),
        log_level=pick('log_level', ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper(),
    )
