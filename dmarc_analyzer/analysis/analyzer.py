"""
DMARC Report Analysis

This module folds parsed DMARC reports into aggregate statistics: message
counts, alignment breakdown, daily trends, failing sources, subdomains and
the percentage strings shown in the reports.
"""

import logging

from dmarc_analyzer.analysis.models import (
    AnalysisResult,
    FailureDetail,
    PassFailCount,
    TopFailingSource,
    TrendPoint,
)
from dmarc_analyzer.utils.bigdecimal import ZERO, FixedPointDecimal
from dmarc_analyzer.utils.helpers import SECONDS_PER_DAY, enrich_ip, epoch_to_date

logger = logging.getLogger(__name__)

NOT_APPLICABLE = 'N/A'
TOP_FAILING_SOURCES_LIMIT = 10


def percentage(numerator, denominator, places=2):
    """
    Format numerator / denominator as a percentage string.

    Args:
        numerator: Count in the share
        denominator: Total count
        places: Number of fractional digits

    Returns:
        str: e.g. "97.50", or NOT_APPLICABLE when the denominator is zero
    """
    if not denominator:
        return NOT_APPLICABLE
    return FixedPointDecimal(numerator).divide(denominator).multiply(100).to_fixed(places)


def ratio(numerator, denominator):
    """numerator / denominator as a FixedPointDecimal; ZERO when the denominator is zero."""
    if not denominator:
        return ZERO
    return FixedPointDecimal(numerator).divide(denominator)


def is_arc_pass(row):
    """Whether a local-policy override was justified by a passing ARC chain."""
    return row.reason == 'local_policy' and 'arc=pass' in (row.comment or '')


def is_passed(row):
    """A row passes DMARC when DKIM or SPF passes, or an ARC override applies."""
    return row.dkim == 'pass' or row.spf == 'pass' or is_arc_pass(row)


def report_day_count(report):
    """Number of calendar days a report's date range is spread over."""
    return (report.date_range.end - report.date_range.begin) // SECONDS_PER_DAY + 1


def generate_trend_data(reports):
    """
    Build per-day pass/fail totals.

    Reports only give a count for their whole date range, so each row's
    count is spread evenly over the days covered. The per-day share is
    floored; remainders are dropped.

    Args:
        reports: Iterable of DmarcReport

    Returns:
        list: TrendPoint objects sorted by date
    """
    daily_data = {}

    for report in reports:
        day_count = report_day_count(report)
        for timestamp in range(report.date_range.begin, report.date_range.end + 1, SECONDS_PER_DAY):
            day = daily_data.setdefault(epoch_to_date(timestamp), {'passed': 0, 'failed': 0, 'total': 0})

            for row in report.records:
                count = row.count // day_count
                day['total'] += count
                if is_passed(row):
                    day['passed'] += count
                else:
                    day['failed'] += count

    return [
        TrendPoint(
            date=date,
            passed=data['passed'],
            failed=data['failed'],
            total=data['total'],
            pass_rate=percentage(data['passed'], data['total']),
        )
        for date, data in sorted(daily_data.items())
    ]


def calculate_rates(result):
    """Percentage strings for the summary and alignment tables."""
    total = result.total_messages
    alignment = result.domain_alignment
    return {
        'pass': percentage(result.passed_messages, total),
        'quarantine': percentage(result.quarantined_messages, total),
        'fail': percentage(result.failed_messages, total),
        'reject': percentage(result.rejected_messages, total),
        'both_aligned': percentage(alignment.both_aligned, total),
        'dkim_aligned': percentage(alignment.dkim_aligned, total),
        'spf_aligned': percentage(alignment.spf_aligned, total),
        'arc_aligned': percentage(alignment.arc_aligned, total),
        'none_aligned': percentage(alignment.none_aligned, total),
    }


def _rank_failing_sources(failing_sources):
    ranked = sorted(failing_sources.items(), key=lambda item: item[1]['count'], reverse=True)

    top_sources = []
    for ip, data in ranked[:TOP_FAILING_SOURCES_LIMIT]:
        ip_info = enrich_ip(ip)
        top_sources.append(TopFailingSource(
            ip=ip,
            count=data['count'],
            disposition=data['disposition'],
            provider=ip_info.provider,
            is_known_provider=ip_info.is_known_provider,
            risk_level=ip_info.risk_level,
        ))
    return top_sources


def analyze_reports(reports, lookup=None):
    """
    Analyze DMARC reports and generate aggregate statistics.

    Args:
        reports: Sequence of DmarcReport, in the order they should be processed
        lookup: Optional callable taking a domain name and returning its
            DomainAuthRecords; called once per analyzed domain

    Returns:
        AnalysisResult
    """
    reports = list(reports)
    result = AnalysisResult(total_reports=len(reports))
    result.trends = generate_trend_data(reports)

    failing_sources = {}

    for report in reports:
        if report.org_name not in result.reporting_orgs:
            result.reporting_orgs.append(report.org_name)

        if result.date_range.earliest is None or report.date_range.begin < result.date_range.earliest:
            result.date_range.earliest = report.date_range.begin
        if result.date_range.latest is None or report.date_range.end > result.date_range.latest:
            result.date_range.latest = report.date_range.end

        if report.domain not in result.unique_analyzed_domains:
            result.unique_analyzed_domains.append(report.domain)

        report_volume = sum(row.count for row in report.records)
        result.volume_by_provider[report.org_name] = (
            result.volume_by_provider.get(report.org_name, 0) + report_volume
        )

        for row in report.records:
            result.total_messages += row.count

            dkim_pass = row.dkim == 'pass'
            spf_pass = row.spf == 'pass'
            arc_pass = is_arc_pass(row)
            passed = is_passed(row)

            if row.header_from != report.domain:
                subdomain = result.subdomain_analysis.setdefault(row.header_from, PassFailCount())
                if passed:
                    subdomain.passed += row.count
                else:
                    subdomain.failed += row.count

            if passed:
                result.passed_messages += row.count

                if dkim_pass and spf_pass:
                    result.domain_alignment.both_aligned += row.count
                elif dkim_pass:
                    result.domain_alignment.dkim_aligned += row.count
                else:
                    result.domain_alignment.spf_aligned += row.count

                if arc_pass:
                    result.domain_alignment.arc_aligned += row.count
            else:
                result.failed_messages += row.count
                result.domain_alignment.none_aligned += row.count

                if row.reason:
                    result.failure_reasons[row.reason] = result.failure_reasons.get(row.reason, 0) + row.count

                source = failing_sources.setdefault(row.source_ip, {'count': 0, 'disposition': row.disposition})
                source['count'] += row.count

                ip_info = enrich_ip(row.source_ip)
                result.failure_details.append(FailureDetail(
                    ip=row.source_ip,
                    provider=ip_info.provider,
                    risk_level=ip_info.risk_level,
                    disposition=row.disposition,
                    count=row.count,
                    header_from=row.header_from,
                    dkim=row.dkim,
                    spf=row.spf,
                    date_range=report.date_range,
                    reason=row.reason,
                    comment=row.comment,
                    report_id=report.report_id,
                    source_zip=report.source_zip or 'unknown',
                    source_file=report.source_file or 'unknown',
                ))

            if row.disposition == 'quarantine':
                result.quarantined_messages += row.count
            elif row.disposition == 'reject':
                result.rejected_messages += row.count

    if lookup is not None:
        for domain in result.unique_analyzed_domains:
            logger.info("Looking up authentication records for %s", domain)
            result.domain_auth_records.append(lookup(domain))

    result.top_failing_sources = _rank_failing_sources(failing_sources)
    result.rates = calculate_rates(result)
    result.fail_ratio = ratio(result.failed_messages, result.total_messages)
    result.quarantine_ratio = ratio(result.quarantined_messages, result.total_messages)

    logger.info(
        "Analyzed %d reports covering %d messages (%d passed, %d failed)",
        result.total_reports,
        result.total_messages,
        result.passed_messages,
        result.failed_messages,
    )
    return result
