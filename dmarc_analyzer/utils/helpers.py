"""
Utility functions for the DMARC Analyzer.

This module contains the address classification tables and various helper
functions used across the DMARC analyzer.
"""

import socket
from datetime import datetime, timezone

from dmarc_analyzer.analysis.models import IpInfo

SECONDS_PER_DAY = 86400

# Address prefixes of well-known sending infrastructure, checked in order
KNOWN_PROVIDERS = [
    ('Google', ['209.85.', '172.217.', '142.250.', '74.125.']),
    ('Microsoft', ['40.92.', '40.107.', '52.96.', '65.55.']),
    ('Amazon SES', ['54.240.', '23.249.', '23.251.']),
    ('Mailchimp', ['198.2.', '205.201.']),
    ('SendGrid', ['167.89.', '169.45.']),
]

PRIVATE_IP_RANGES = [
    '192.168.',
    '10.',
    '172.16.',
    '172.17.',
    '172.18.',
    '172.19.',
    '172.20.',
    '172.21.',
    '172.22.',
    '172.23.',
    '172.24.',
    '172.25.',
    '172.26.',
    '172.27.',
    '172.28.',
    '172.29.',
    '172.30.',
    '172.31.',
]


def enrich_ip(ip):
    """
    Classify a source address by prefix.

    Known provider ranges give risk 'low'; private ranges 'medium';
    anything else 'high'.
    """
    for name, ranges in KNOWN_PROVIDERS:
        if any(ip.startswith(prefix) for prefix in ranges):
            return IpInfo(ip=ip, provider=name, is_known_provider=True, risk_level='low')

    is_private = any(ip.startswith(prefix) for prefix in PRIVATE_IP_RANGES)
    return IpInfo(
        ip=ip,
        provider='Unknown',
        is_known_provider=False,
        risk_level='medium' if is_private else 'high',
    )


def resolve_ip(ip):
    """Resolve an IP address to a hostname using reverse DNS lookup."""
    try:
        hostname = socket.gethostbyaddr(ip)[0]
        return hostname
    except (socket.herror, socket.gaierror, OSError):
        return None


def epoch_to_date(timestamp):
    """Format epoch seconds as a UTC YYYY-MM-DD string."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime('%Y-%m-%d')


def days_between(start, end):
    """Whole days between two epoch timestamps (floored)."""
    return (end - start) // SECONDS_PER_DAY
