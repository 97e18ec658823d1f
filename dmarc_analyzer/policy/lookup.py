"""
Live DNS Lookup of Domain Authentication Records

Resolves the SPF, DKIM and DMARC TXT records of a domain. Lookup failures of
any kind are reported as an absent record, never as an exception.
"""

import logging

import dns.exception
import dns.resolver

from dmarc_analyzer.policy.records import (
    DomainAuthRecords,
    parse_dkim_record,
    parse_dmarc_record,
    parse_spf_record,
)

logger = logging.getLogger(__name__)

# Known providers and their common DKIM selectors, matched by SPF include or MX host
KNOWN_PROVIDER_DKIM_SELECTORS = [
    {
        'provider': 'Google Workspace',
        'selectors': ['google'],
        'spf_includes': ['_spf.google.com'],
        'mx_domains': ['aspmx.l.google.com'],
    },
    {
        'provider': 'Microsoft 365',
        'selectors': ['selector1', 'selector2'],
        'spf_includes': ['spf.protection.outlook.com'],
        'mx_domains': ['mail.protection.outlook.com'],
    },
    {
        'provider': 'Yahoo',
        'selectors': ['default', 'selector1'],
        'spf_includes': ['_spf.mail.yahoo.com'],
    },
    {
        'provider': 'SendGrid',
        'selectors': ['s1', 's2'],
        'spf_includes': ['_spf.sendgrid.net'],
    },
    {
        'provider': 'Mailchimp',
        'selectors': ['k1'],
        'spf_includes': ['servers.mcsv.net'],
    },
]

FALLBACK_DKIM_SELECTOR = 'default'


def _resolve_txt(resolver, name):
    """Return every TXT record at name as a joined string."""
    answers = resolver.resolve(name, 'TXT')
    return [b''.join(rdata.strings).decode('utf-8', errors='replace') for rdata in answers]


def _resolve_mx(resolver, name):
    answers = resolver.resolve(name, 'MX')
    return [rdata.exchange.to_text().rstrip('.').lower() for rdata in answers]


def candidate_dkim_selectors(spf_mechanisms, mx_hosts):
    """
    Choose DKIM selectors to try, based on which providers the domain uses.

    Args:
        spf_mechanisms: Mechanisms of the domain's SPF record
        mx_hosts: Lower-cased MX host names of the domain

    Returns:
        list: Selectors in the order they should be tried, without duplicates
    """
    selectors = []
    for provider in KNOWN_PROVIDER_DKIM_SELECTORS:
        matches_spf = any(
            include in mechanism
            for include in provider.get('spf_includes', [])
            for mechanism in spf_mechanisms
        )
        matches_mx = any(
            mx_domain in mx
            for mx_domain in provider.get('mx_domains', [])
            for mx in mx_hosts
        )
        if matches_spf or matches_mx:
            selectors.extend(provider['selectors'])

    selectors.append(FALLBACK_DKIM_SELECTOR)
    return list(dict.fromkeys(selectors))


def lookup_domain_auth_records(domain, resolver=None):
    """
    Look up and parse the SPF, DKIM and DMARC records for a domain.

    Args:
        domain: Domain name to query
        resolver: dns.resolver.Resolver to use (default: system configuration)

    Returns:
        DomainAuthRecords: Fields are None where a record is missing or the
        lookup failed
    """
    result = DomainAuthRecords(domain=domain)

    if resolver is None:
        try:
            resolver = dns.resolver.Resolver()
        except dns.exception.DNSException as e:
            logger.warning("No DNS resolver available, skipping lookups for %s: %s", domain, e)
            return result

    # SPF
    spf_mechanisms = []
    try:
        spf_record = next(
            (r for r in _resolve_txt(resolver, domain) if r.lower().startswith('v=spf1')),
            None,
        )
        if spf_record:
            result.spf = spf_record
            result.spf_parsed = parse_spf_record(spf_record)
            if result.spf_parsed.valid:
                spf_mechanisms = result.spf_parsed.mechanisms
    except dns.exception.DNSException as e:
        logger.debug("SPF lookup failed for %s: %s", domain, e)

    # MX, only used to pick DKIM selectors
    mx_hosts = []
    try:
        mx_hosts = _resolve_mx(resolver, domain)
    except dns.exception.DNSException as e:
        logger.debug("MX lookup failed for %s: %s", domain, e)

    # DKIM, first selector that answers wins
    for selector in candidate_dkim_selectors(spf_mechanisms, mx_hosts):
        try:
            dkim_record = ' '.join(_resolve_txt(resolver, f'{selector}._domainkey.{domain}'))
        except dns.exception.DNSException as e:
            logger.debug("DKIM selector %s not found for %s: %s", selector, domain, e)
            continue
        if dkim_record:
            result.dkim = dkim_record
            result.dkim_parsed = parse_dkim_record(dkim_record)
            break

    # DMARC
    try:
        dmarc_record = next(
            (r for r in _resolve_txt(resolver, f'_dmarc.{domain}') if r.lower().startswith('v=dmarc1')),
            None,
        )
        if dmarc_record:
            result.dmarc = dmarc_record
            result.dmarc_parsed = parse_dmarc_record(dmarc_record)
    except dns.exception.DNSException as e:
        logger.debug("DMARC lookup failed for %s: %s", domain, e)

    logger.info(
        "DNS records for %s: SPF %s, DKIM %s, DMARC %s",
        domain,
        'found' if result.spf else 'missing',
        'found' if result.dkim else 'missing',
        'found' if result.dmarc else 'missing',
    )
    return result
