"""
Text Report Generator for DMARC Analyzer

This module generates a human-readable text report from DMARC analysis results.
"""

from tabulate import tabulate

from dmarc_analyzer.analysis.analyzer import NOT_APPLICABLE
from dmarc_analyzer.utils.helpers import epoch_to_date, resolve_ip


def _shown(rate):
    return rate if rate == NOT_APPLICABLE else f"{rate}%"


def generate_text_report(analysis, resolve_ips=False):
    """
    Generate a human-readable report from the analysis results.

    Args:
        analysis: AnalysisResult from analyze_reports
        resolve_ips: Whether to resolve failing source addresses to hostnames

    Returns:
        str: Formatted text report
    """
    if not analysis.total_messages:
        return "No valid DMARC reports found or no messages reported for the analyzed period."

    rates = analysis.rates
    report_lines = []

    # Summary section
    report_lines.append("= DMARC Report Summary =")
    if analysis.date_range.earliest is not None:
        report_lines.append(
            f"Period: {epoch_to_date(analysis.date_range.earliest)} to {epoch_to_date(analysis.date_range.latest)}"
        )
    report_lines.append(f"Total Reports: {analysis.total_reports}")
    report_lines.append(f"Total Messages: {analysis.total_messages}")
    report_lines.append(f"Domains Analyzed: {', '.join(analysis.unique_analyzed_domains)}")
    report_lines.append(f"Reporting Organizations: {', '.join(analysis.reporting_orgs)}")
    report_lines.append("")

    # Authentication results
    report_lines.append("= Authentication Results =")
    results_table = [
        ["Passed", analysis.passed_messages, _shown(rates['pass'])],
        ["Quarantined", analysis.quarantined_messages, _shown(rates['quarantine'])],
        ["Failed", analysis.failed_messages, _shown(rates['fail'])],
        ["Rejected", analysis.rejected_messages, _shown(rates['reject'])],
    ]
    report_lines.append(tabulate(results_table, headers=["Status", "Count", "%"], tablefmt="simple"))
    report_lines.append("")

    # Alignment
    report_lines.append("= Domain Alignment =")
    alignment = analysis.domain_alignment
    alignment_table = [
        ["DKIM + SPF", alignment.both_aligned, _shown(rates['both_aligned'])],
        ["DKIM only", alignment.dkim_aligned, _shown(rates['dkim_aligned'])],
        ["SPF only", alignment.spf_aligned, _shown(rates['spf_aligned'])],
        ["ARC", alignment.arc_aligned, _shown(rates['arc_aligned'])],
        ["None", alignment.none_aligned, _shown(rates['none_aligned'])],
    ]
    report_lines.append(tabulate(alignment_table, headers=["Alignment", "Count", "%"], tablefmt="simple"))
    report_lines.append("")

    # Top failing sources
    if analysis.top_failing_sources:
        report_lines.append("= Top Failing Sources =")
        source_table = []
        for source in analysis.top_failing_sources:
            ip_display = source.ip
            if resolve_ips:
                hostname = resolve_ip(source.ip)
                if hostname:
                    ip_display = f"{source.ip} ({hostname})"
            source_table.append([ip_display, source.provider, source.risk_level, source.count, source.disposition])
        report_lines.append(tabulate(source_table,
                                     headers=["IP", "Provider", "Risk", "Failed", "Disposition"],
                                     tablefmt="simple"))
        report_lines.append("")

    # Failure reasons
    if analysis.failure_reasons:
        report_lines.append("= Failure Reasons =")
        reasons_table = sorted(analysis.failure_reasons.items(), key=lambda x: x[1], reverse=True)
        report_lines.append(tabulate(reasons_table, headers=["Reason", "Messages"], tablefmt="simple"))
        report_lines.append("")

    # Subdomains
    if analysis.subdomain_analysis:
        report_lines.append("= Subdomains =")
        subdomain_table = [
            [name, counts.passed, counts.failed]
            for name, counts in sorted(analysis.subdomain_analysis.items())
        ]
        report_lines.append(tabulate(subdomain_table, headers=["Header From", "Passed", "Failed"], tablefmt="simple"))
        report_lines.append("")

    # Volume by reporting organization
    report_lines.append("= Volume by Reporting Organization =")
    volume_table = sorted(analysis.volume_by_provider.items(), key=lambda x: x[1], reverse=True)
    report_lines.append(tabulate(volume_table, headers=["Organization", "Messages"], tablefmt="simple"))

    return "\n".join(report_lines)
