"""
HTML Report Generator for DMARC Analyzer

This module generates an HTML report with a trend chart, summary tables and
DNS record explanations from DMARC analysis results.
"""

import html
import json
import re

from dmarc_analyzer.analysis.analyzer import NOT_APPLICABLE
from dmarc_analyzer.utils.helpers import days_between, epoch_to_date

CHART_LIBRARY_URL = "https://cdnjs.cloudflare.com/ajax/libs/Chart.js/3.9.1/chart.min.js"

PLACEHOLDERS = {
    'chart_library': "<!-- TREND_CHART_SCRIPT_LIBRARY_PLACEHOLDER -->",
    'report_details': "<!-- REPORT_DETAILS_PLACEHOLDER -->",
    'summary': "<!-- SUMMARY_PLACEHOLDER -->",
    'trend_chart': "<!-- TREND_CHART_PLACEHOLDER -->",
    'chart_script': "<!-- CHART_SCRIPT_PLACEHOLDER -->",
    'tables': "<!-- TABLES_PLACEHOLDER -->",
}

NOT_APPLICABLE_TITLE = "No reports or messages found for period"


def _e(value):
    """Escape a value for HTML output."""
    return html.escape(str(value))


def explain_spf_all(all_qualifier):
    if not all_qualifier:
        return "No 'all' mechanism specified, so the default is neutral."
    if all_qualifier == "-all":
        return "A strict policy is enforced: only the listed mechanisms are allowed. All other mail will be rejected."
    if all_qualifier == "~all":
        return ("A softfail policy: non-listed servers are not authorized but mail may still be accepted, "
                "typically marked as suspicious.")
    if all_qualifier == "+all":
        return "A permissive policy: all servers are explicitly allowed to send mail."
    if all_qualifier == "?all":
        return "A neutral policy: no assertion about mail legitimacy."
    return f"Custom 'all' mechanism: {_e(all_qualifier)}"


def generate_spf_explanation(spf):
    if not spf.valid:
        return [f"Invalid SPF record: {_e(spf.error)}"]

    if spf.mechanisms:
        mechanisms = f"The record includes mechanisms: {_e(', '.join(spf.mechanisms))}."
    else:
        mechanisms = "No mechanisms are defined."

    if spf.modifiers:
        pairs = ', '.join(f"{k}={v}" for k, v in spf.modifiers.items())
        modifiers = f"Additional modifiers: {_e(pairs)}."
    else:
        modifiers = "No additional modifiers are defined."

    return [mechanisms, modifiers, explain_spf_all(spf.all)]


def generate_dkim_explanation(dkim):
    if not dkim.valid:
        return [f"Invalid DKIM record: {_e(dkim.error)}"]
    return [f"This DKIM record publishes a {_e(dkim.key_type.upper())} public key to verify email signatures."]


def explain_dmarc_policy(policy):
    if policy == "none":
        return "Policy 'none': only monitoring is performed, no enforcement action."
    if policy == "quarantine":
        return "Policy 'quarantine': emails failing authentication are marked as suspicious (e.g., sent to spam)."
    if policy == "reject":
        return "Policy 'reject': emails failing authentication are rejected outright."
    return f"Custom policy '{_e(policy)}'."


def _alignment_mode(mode):
    return "strict" if mode == "s" else "relaxed"


def generate_dmarc_explanation(dmarc):
    if not dmarc.valid:
        return [f"Invalid DMARC record: {_e(dmarc.error)}"]

    lines = [explain_dmarc_policy(dmarc.policy)]

    if dmarc.subdomain_policy:
        lines.append(f"For subdomains, the policy is '{_e(dmarc.subdomain_policy)}'.")
    else:
        lines.append("No subdomain policy is specified; defaults to the main policy.")

    if dmarc.adkim:
        lines.append(f"DKIM alignment is '{_e(dmarc.adkim)}' ({_alignment_mode(dmarc.adkim)}).")
    else:
        lines.append("No DKIM alignment specified; default is relaxed.")

    if dmarc.aspf:
        lines.append(f"SPF alignment is '{_e(dmarc.aspf)}' ({_alignment_mode(dmarc.aspf)}).")
    else:
        lines.append("No SPF alignment specified; default is relaxed.")

    lines.append(f"{_e(dmarc.pct or '100')}% of messages are subjected to this policy.")

    if dmarc.rua:
        recipients = '</strong>, <strong class="domain">'.join(_e(r.replace("mailto:", "")) for r in dmarc.rua)
        lines.append(f'Aggregate reports will be sent to: <strong class="domain">{recipients}</strong>.')
    else:
        lines.append("No aggregate report recipients are specified.")

    if dmarc.ruf:
        lines.append(f"Forensic reports will be sent to: {_e(', '.join(dmarc.ruf))}.")
    else:
        lines.append("No forensic report recipients are specified.")

    if dmarc.fo:
        lines.append(f"Failure reporting options: {_e(dmarc.fo)}.")
    else:
        lines.append("No specific failure reporting options are defined.")

    return lines


def generate_recommendations(analysis):
    """
    Build recommendation messages from the DNS records and failure rates.

    Returns:
        list: HTML snippets, one per recommendation
    """
    recs = []
    fail_ratio = analysis.fail_ratio
    quarantine_ratio = analysis.quarantine_ratio

    # SPF
    for rec in analysis.domain_auth_records:
        domain = _e(rec.domain)
        if not rec.spf:
            recs.append(f'&#10060; SPF record <strong class="fail">not found</strong> for '
                        f'<strong class="domain">{domain}</strong>. You should create an SPF record.')
        elif rec.spf_parsed and not rec.spf_parsed.valid:
            recs.append(f'&#10060; SPF record for <strong class="domain">{domain}</strong> is invalid: '
                        f'<strong class="fail">{_e(rec.spf_parsed.error)}</strong>. Please fix it.')
        elif rec.spf_parsed and rec.spf_parsed.all == "+all":
            recs.append(f'&#9888;&#65039; SPF record for <strong class="domain">{domain}</strong> is overly '
                        f'permissive <strong class="warn">+all</strong>. Consider restricting it.')
        elif rec.spf_parsed and rec.spf_parsed.all == "-all" and fail_ratio.gt("0.1"):
            recs.append(f'&#9888;&#65039; SPF for <strong class="domain">{domain}</strong> uses strict '
                        f'<strong>-all</strong> but <strong class="fail">&gt;10%</strong> of messages are '
                        f'failing. Check if legitimate senders are missing.')

    # DKIM
    for rec in analysis.domain_auth_records:
        domain = _e(rec.domain)
        if not rec.dkim:
            recs.append(f'&#10060; DKIM record <strong class="fail">not found</strong> for '
                        f'<strong class="domain">{domain}</strong>. Consider setting up DKIM signing.')
        elif rec.dkim_parsed and not rec.dkim_parsed.valid:
            recs.append(f'&#10060; DKIM record for <strong class="domain">{domain}</strong> is invalid: '
                        f'<strong class="fail">{_e(rec.dkim_parsed.error)}</strong>. Fix this.')

    # DMARC
    for rec in analysis.domain_auth_records:
        domain = _e(rec.domain)
        if not rec.dmarc:
            recs.append(f'&#10060; DMARC record not found for <strong class="domain">{domain}</strong>. '
                        f'Strongly recommend configuring DMARC.')
        elif rec.dmarc_parsed and not rec.dmarc_parsed.valid:
            recs.append(f'&#10060; DMARC record for <strong class="domain">{domain}</strong> is invalid: '
                        f'<strong class="fail">{_e(rec.dmarc_parsed.error)}</strong>. Fix this.')
        elif rec.dmarc_parsed:
            policy = rec.dmarc_parsed.policy
            if policy == "none" and fail_ratio.lt("0.01"):
                recs.append(f'&#9989; DMARC policy for <strong class="domain">{domain}</strong> is '
                            f'<strong class="fail">none</strong> but failure rate is '
                            f'<strong class="pass">&lt;1%</strong>. Consider moving to '
                            f'<strong class="warn">quarantine</strong>.')
            elif policy == "quarantine" and fail_ratio.lt("0.01"):
                recs.append(f'&#9989; DMARC policy for <strong class="domain">{domain}</strong> is '
                            f'<strong class="warn">quarantine</strong> with <strong class="pass">very low'
                            f'</strong> failure rate. You can consider moving to '
                            f'<strong class="fail">reject</strong>.')
            elif policy == "reject" and fail_ratio.gt("0.05"):
                recs.append(f'&#9888;&#65039; DMARC policy for <strong class="domain">{domain}</strong> is '
                            f'<strong class="fail">reject</strong> but <strong class="fail">&gt;5%</strong> '
                            f'of messages fail. Verify legitimate sources.')

    # Aggregate failure rate
    if fail_ratio.gt("0.05"):
        recs.append('&#10060; High failure rate <strong class="fail">&gt;5%</strong>. Investigate failing '
                    'sources to avoid losing legitimate mail.')
    elif quarantine_ratio.gt("0.05"):
        recs.append(f'&#9888;&#65039; Many messages quarantined: <strong class="fail">'
                    f'{analysis.rates["quarantine"]}%</strong>. Review authentication records and sources.')

    if not recs:
        recs.append('&#11088; All authentication records are <strong class="pass">valid</strong> and failure '
                    'rates are <strong class="pass">low</strong>. Great job!')

    return recs


def render_record_key_value_pairs(record):
    """Mark up the tokens of a DNS TXT record for display."""
    chunks = []
    for chunk in (part.strip() for part in record.split(";")):
        if not chunk:
            continue
        tokens = []
        for token in chunk.split():
            if "=" in token or ":" in token:
                separator = "=" if "=" in token else ":"
                key, _, value = token.partition(separator)
                tokens.append(
                    f'<span class="record-kv"><span class="record-key">{_e(key)}</span>{separator}'
                    f'<span class="record-value">{_e(value)}</span></span>'
                )
            else:
                tokens.append(f'<span class="record-kv"><span class="record-token">{_e(token)}</span></span>')
        chunks.append("".join(tokens))
    return '<span class="record-separator">;</span>'.join(chunks)


def _rate_cells(rate):
    """Card text, table text and bar width for one rate string."""
    if rate == NOT_APPLICABLE:
        return (
            f'<span title="{NOT_APPLICABLE_TITLE}">N/A<span class="tooltip">&#128269;</span></span>',
            f'<span title="{NOT_APPLICABLE_TITLE}">N/A</span>',
            "0%",
        )
    return f"{rate}%", f"{rate}%", f"{rate}%"


def generate_report_details(analysis):
    if analysis.date_range.earliest is None:
        period = "No reports analyzed"
    else:
        day_count = days_between(analysis.date_range.earliest, analysis.date_range.latest)
        period = (f"{epoch_to_date(analysis.date_range.earliest)} to {epoch_to_date(analysis.date_range.latest)} "
                  f"({day_count} day{'' if day_count == 1 else 's'})")

    orgs = '</span>, <span class="domain">'.join(_e(org) for org in analysis.reporting_orgs)
    domains = '</span>, <span class="domain">'.join(_e(d) for d in analysis.unique_analyzed_domains)

    return f"""
        <hr />
        <h2>Report Details</h2>
        <p><strong>Analysis Period:</strong> {period}</p>
        <p><strong>Reporting Organizations:</strong> <span class="domain">{orgs}</span></p>
        <p><strong>Analyzed domains:</strong> <span class="domain">{domains}</span></p>"""


def generate_summary(analysis, cells):
    return f"""
        <hr />
        <div class="summary">
            <div class="stat-card">
                <div class="stat-value">{analysis.total_reports}</div>
                <div class="stat-label">Total Reports</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{analysis.total_messages}</div>
                <div class="stat-label">Total Messages</div>
            </div>
            <div class="stat-card">
                <div class="stat-value pass">{cells['pass'][0]}</div>
                <div class="stat-label">Pass Rate</div>
            </div>
            <div class="stat-card">
                <div class="stat-value quarantine">{cells['quarantine'][0]}</div>
                <div class="stat-label">Quarantine Rate</div>
            </div>
            <div class="stat-card">
                <div class="stat-value fail">{cells['fail'][0]}</div>
                <div class="stat-label">Fail Rate</div>
            </div>
        </div>"""


def generate_authentication_results(analysis, cells):
    rows = ""
    for css, label, count, key in (
        ("pass", "&#10003; Passed", analysis.passed_messages, 'pass'),
        ("warn", "&#9888; Quarantined", analysis.quarantined_messages, 'quarantine'),
        ("fail", "&#10007; Failed", analysis.failed_messages, 'fail'),
    ):
        _, table_text, width = cells[key]
        rows += f"""
                <tr>
                    <td class="{css}">{label}</td>
                    <td>{count}</td>
                    <td>{table_text}</td>
                    <td>
                        <div class="progress-bar">
                            <div class="progress-fill {css}" style="width: {width}"></div>
                        </div>
                    </td>
                </tr>"""

    return f"""
        <hr />
        <h2>Authentication Results</h2>
        <table>
            <thead>
                <tr><th>Status</th><th>Count</th><th>Percentage</th><th>Progress</th></tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>"""


def generate_domain_alignment(analysis):
    alignment = analysis.domain_alignment
    rows = ""
    for label, count, key in (
        ("DKIM + SPF Aligned", alignment.both_aligned, 'both_aligned'),
        ("DKIM Only", alignment.dkim_aligned, 'dkim_aligned'),
        ("SPF Only", alignment.spf_aligned, 'spf_aligned'),
        ("ARC", alignment.arc_aligned, 'arc_aligned'),
        ("No Alignment", alignment.none_aligned, 'none_aligned'),
    ):
        rate = analysis.rates[key]
        shown = rate if rate == NOT_APPLICABLE else f"{rate}%"
        rows += f"""
                <tr><td>{label}</td><td>{count}</td><td>{shown}</td></tr>"""

    return f"""
        <hr />
        <h2>Domain Alignment</h2>
        <table>
            <thead>
                <tr><th>Alignment Type</th><th>Count</th><th>Percentage</th></tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>
        <div class="alignment-legend">
            <span class="explanation"><strong>DKIM:</strong> DomainKeys Identified Mail</span>
            <span class="explanation"><strong>SPF:</strong> Sender Policy Framework</span>
            <span class="explanation"><strong>ARC:</strong> Authenticated Received Chain</span>
        </div>"""


def generate_failing_sources(analysis):
    if not analysis.top_failing_sources:
        return ""

    rows = "".join(f"""
                <tr>
                    <td>{_e(source.ip)}</td>
                    <td>{_e(source.provider)}</td>
                    <td>{_e(source.risk_level)}</td>
                    <td>{source.count}</td>
                    <td>{_e(source.disposition)}</td>
                </tr>""" for source in analysis.top_failing_sources)

    return f"""
        <hr />
        <h2>Top Failing Sources</h2>
        <table>
            <thead>
                <tr><th>Source IP</th><th>Provider</th><th>Risk Level</th><th>Failed Messages</th><th>Disposition</th></tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>"""


def generate_failure_cards(analysis):
    if not analysis.failure_details:
        return ""

    cards = ""
    for f in sorted(analysis.failure_details, key=lambda detail: detail.date_range.begin):
        reason = f"<p><strong>Reason:</strong> {_e(f.reason)}</p>" if f.reason else ""
        comment = f"<p><strong>Comment:</strong> {_e(f.comment)}</p>" if f.comment else ""
        cards += f"""
            <div class="failure-card">
                <h3>{_e(f.ip)} ({_e(f.provider)})</h3>
                <div class="meta">{epoch_to_date(f.date_range.begin)} to {epoch_to_date(f.date_range.end)}</div>
                <div class="meta">
                    <span class="badge {_e(f.risk_level)}">{_e(f.risk_level.upper())}</span>
                    <span class="badge {_e(f.disposition)}">{_e(f.disposition.upper())}</span>
                </div>
                <p><strong>Count:</strong> {f.count}</p>
                <p><strong>Header From:</strong> {_e(f.header_from)}</p>
                {reason}
                {comment}
                <p><strong>DKIM:</strong> {_e(f.dkim)} &nbsp;&nbsp; <strong>SPF:</strong> {_e(f.spf)}</p>
                <p><strong>Report:</strong> {_e(f.report_id)}</p>
                <p><strong>Zip File:</strong> {_e(f.source_zip)}</p>
                <p><strong>XML File:</strong> {_e(f.source_file)}</p>
            </div>"""

    return f"""
        <hr />
        <h2>All Failures and Quarantined Messages</h2>
        <div class="failure-records">{cards}
        </div>"""


def generate_domain_auth_records(analysis, dns_lookups_enabled):
    if not analysis.domain_auth_records:
        if dns_lookups_enabled:
            return """
        <hr />
        <h2>Domain Authentication Records</h2>
        <strong>Lookups were enabled but no records found.</strong>"""
        return ""

    not_found = "&#10060; Not Found"
    rows = ""
    for rec in analysis.domain_auth_records:
        spf = f"<code>{render_record_key_value_pairs(rec.spf)}</code>" if rec.spf else not_found
        if rec.dkim:
            dkim = (f'<code title="{_e(rec.dkim)}">'
                    f'{render_record_key_value_pairs(rec.dkim[:40])}...</code>')
        else:
            dkim = not_found
        dmarc = f"<code>{render_record_key_value_pairs(rec.dmarc)}</code>" if rec.dmarc else not_found
        rows += f"""
            <tr>
                <td><strong class="domain">{_e(rec.domain)}</strong></td>
                <td>{spf}</td>
                <td>{dkim}</td>
                <td>{dmarc}</td>
            </tr>"""

    return f"""
        <hr />
        <h2>Domain Authentication Records</h2>
        <table>
            <thead>
                <tr><th>Domain</th><th>SPF</th><th>DKIM</th><th>DMARC</th></tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>"""


def _paragraphs(lines):
    return "<p>" + "</p><p>".join(lines) + "</p>"


def _record_block(label, raw, parsed, details, explanation, display_raw=None):
    """One mechanism inside a domain card: found and valid, invalid, or missing."""
    if not raw:
        return f'<p><strong>{label}:</strong> <code><span class="fail">&#10060; Not Found</span></code></p>'
    css = label.lower()
    if parsed is not None and parsed.valid:
        shown = render_record_key_value_pairs(display_raw if display_raw is not None else raw)
        return f"""
            <p><strong>{label}:</strong> <code>{shown}</code></p>
            <div class="{css}-details">{details()}</div>
            <div class="{css}-explanation">{explanation}</div>"""
    return f"""
            <p><strong>{label}:</strong> <code><span class="fail">&#10060; Invalid: No parsed {label} data.</span></code></p>
            <div class="{css}-explanation">{explanation}</div>"""


def generate_domain_auth_cards(analysis):
    if not analysis.domain_auth_records:
        return ""

    cards = ""
    for rec in analysis.domain_auth_records:
        spf_explanation = (_paragraphs(generate_spf_explanation(rec.spf_parsed))
                           if rec.spf_parsed else "No parsed SPF data available.")
        dkim_explanation = (_paragraphs(generate_dkim_explanation(rec.dkim_parsed))
                            if rec.dkim_parsed else "No parsed DKIM data available.")
        dmarc_explanation = (_paragraphs(generate_dmarc_explanation(rec.dmarc_parsed))
                             if rec.dmarc_parsed else "No parsed DMARC data available.")

        def spf_details(spf=rec.spf_parsed):
            modifiers = ", ".join(f"{k}={v}" for k, v in spf.modifiers.items())
            return (f"<p><strong>Mechanisms:</strong> {_e(', '.join(spf.mechanisms) or 'N/A')}</p>"
                    f"<p><strong>Modifiers:</strong> {_e(modifiers or 'N/A')}</p>"
                    f"<p><strong>All Policy:</strong> {_e(spf.all or 'N/A')}</p>")

        def dkim_details(dkim=rec.dkim_parsed):
            return (f"<p><strong>Key Type:</strong> {_e(dkim.key_type)}</p>"
                    f'<p><strong>Public Key:</strong> <code class="dkim-publickey">{_e(dkim.public_key)}</code></p>')

        def dmarc_details(dmarc=rec.dmarc_parsed):
            rua = _e(", ".join(dmarc.rua)) if dmarc.rua else "None"
            return (f"<p><strong>Policy:</strong> {_e(dmarc.policy)}</p>"
                    f"<p><strong>Subdomain Policy:</strong> {_e(dmarc.subdomain_policy or 'N/A')}</p>"
                    f"<p><strong>Alignment DKIM:</strong> {_e(dmarc.adkim or 'N/A')}</p>"
                    f"<p><strong>Alignment SPF:</strong> {_e(dmarc.aspf or 'N/A')}</p>"
                    f"<p><strong>Percentage:</strong> {_e(dmarc.pct or '100')}</p>"
                    f"<p><strong>Aggregate Reports:</strong> {rua}</p>")

        cards += f"""
        <div class="auth-card">
            <h3>{_e(rec.domain)}</h3>
            {_record_block("SPF", rec.spf, rec.spf_parsed, spf_details, spf_explanation)}
            {_record_block("DKIM", rec.dkim, rec.dkim_parsed, dkim_details, dkim_explanation,
                           display_raw=(rec.dkim or "")[:60] + "...")}
            {_record_block("DMARC", rec.dmarc, rec.dmarc_parsed, dmarc_details, dmarc_explanation)}
        </div>"""

    return f"""
        <hr />
        <h2>Domain Authentication Details</h2>
        <div class="domain-auth-cards">{cards}
        </div>"""


def generate_chart_script(analysis):
    labels = [point.date for point in analysis.trends]
    data = [None if point.pass_rate == NOT_APPLICABLE else float(point.pass_rate) for point in analysis.trends]
    return f"""
    <script>
        const ctx = document.getElementById('trendChart').getContext('2d');
        new Chart(ctx, {{
            type: 'line',
            data: {{
                labels: {json.dumps(labels)},
                datasets: [{{
                    label: 'Pass Rate %',
                    data: {json.dumps(data)},
                    borderColor: '#007bff',
                    fill: false
                }}]
            }},
            options: {{
                maintainAspectRatio: false
            }}
        }});
    </script>"""


def generate_html_report(analysis, include_chart=True, dns_lookups_enabled=True, template=None):
    """
    Generate an HTML report from DMARC analysis results.

    Args:
        analysis: AnalysisResult from analyze_reports
        include_chart: Whether to include the pass rate trend chart
        dns_lookups_enabled: Whether DNS lookups were requested (changes the
            message shown when no records are present)
        template: Page template containing the placeholder comments
            (default: the built-in template)

    Returns:
        str: Formatted HTML report
    """
    if template is None:
        template = DEFAULT_TEMPLATE

    cells = {
        'pass': _rate_cells(analysis.rates['pass']),
        'quarantine': _rate_cells(analysis.rates['quarantine']),
        'fail': _rate_cells(analysis.rates['fail']),
    }

    tables = [
        generate_authentication_results(analysis, cells),
        generate_domain_alignment(analysis),
        generate_failing_sources(analysis),
        generate_failure_cards(analysis),
        generate_domain_auth_records(analysis, dns_lookups_enabled),
        generate_domain_auth_cards(analysis),
        f"""
        <hr />
        <div class="recommendation">
            <h3>Recommendations</h3>
            {"".join(f"<p>{r}</p>" for r in generate_recommendations(analysis))}
        </div>""",
    ]

    replacements = {
        'chart_library': f'<script src="{CHART_LIBRARY_URL}"></script>' if include_chart else "",
        'report_details': generate_report_details(analysis),
        'summary': generate_summary(analysis, cells),
        'trend_chart': ("<div class=\"chart-container\"><canvas id='trendChart'></canvas></div>"
                        if include_chart else ""),
        'chart_script': generate_chart_script(analysis) if include_chart else "",
        'tables': "".join(tables),
    }

    # single pass so inserted content is never re-scanned for placeholders
    by_placeholder = {PLACEHOLDERS[key]: value for key, value in replacements.items()}
    pattern = re.compile("|".join(re.escape(p) for p in by_placeholder))
    return pattern.sub(lambda match: by_placeholder[match.group(0)], template)


DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>DMARC Report</title>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <!-- TREND_CHART_SCRIPT_LIBRARY_PLACEHOLDER -->
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 1000px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f9f9f9;
        }

        h1, h2, h3 {
            font-weight: 500;
        }

        hr {
            border: none;
            border-top: 1px solid #e1e4e8;
            margin: 30px 0;
        }

        table {
            width: 100%;
            border-collapse: collapse;
            background-color: white;
        }

        th, td {
            padding: 8px 12px;
            border-bottom: 1px solid #e1e4e8;
            text-align: left;
        }

        .domain { font-weight: 600; }
        .pass { color: #6BCB77; }
        .warn, .quarantine { color: #F4B400; }
        .fail { color: #FF6B6B; }

        .summary {
            display: flex;
            justify-content: space-between;
            border: 1px solid #e1e4e8;
            border-radius: 6px;
            background-color: white;
            overflow: hidden;
        }

        .stat-card {
            text-align: center;
            flex: 1;
            padding: 15px 10px;
            border-right: 1px solid #e1e4e8;
        }

        .stat-card:last-child {
            border-right: none;
        }

        .stat-value {
            font-size: 28px;
            font-weight: 300;
        }

        .stat-label {
            color: #6a737d;
            font-size: 12px;
            text-transform: uppercase;
        }

        .progress-bar {
            background-color: #eee;
            border-radius: 3px;
            height: 10px;
            width: 100%;
        }

        .progress-fill {
            height: 10px;
            border-radius: 3px;
        }

        .progress-fill.pass { background-color: #6BCB77; }
        .progress-fill.warn { background-color: #F4B400; }
        .progress-fill.fail { background-color: #FF6B6B; }

        .chart-container {
            position: relative;
            height: 300px;
            margin: 30px 0;
        }

        .alignment-legend .explanation {
            margin-right: 15px;
            font-size: 13px;
            color: #6a737d;
        }

        .failure-records, .domain-auth-cards {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(300px, 1fr));
            gap: 15px;
        }

        .failure-card, .auth-card {
            background-color: white;
            border: 1px solid #e1e4e8;
            border-radius: 6px;
            padding: 12px 15px;
            overflow-wrap: anywhere;
        }

        .meta {
            color: #6a737d;
            font-size: 13px;
        }

        .badge {
            display: inline-block;
            padding: 1px 6px;
            border-radius: 3px;
            font-size: 11px;
            background-color: #eee;
        }

        .badge.low { background-color: #DFF5E1; }
        .badge.medium { background-color: #FFF9C4; }
        .badge.high, .badge.reject { background-color: #FFE0E0; }
        .badge.quarantine { background-color: #FFEFD5; }

        .record-key { color: #0366d6; }
        .record-separator { color: #6a737d; margin: 0 4px; }
        .dkim-publickey { word-break: break-all; }

        .recommendation {
            background-color: #f6f8fa;
            padding: 15px;
            border-radius: 6px;
            border: 1px solid #e1e4e8;
        }
    </style>
</head>
<body>
    <div class="header">
        <h1>DMARC Report</h1>
    </div>
    <!-- REPORT_DETAILS_PLACEHOLDER -->
    <!-- SUMMARY_PLACEHOLDER -->
    <!-- TREND_CHART_PLACEHOLDER -->
    <!-- TABLES_PLACEHOLDER -->
    <!-- CHART_SCRIPT_PLACEHOLDER -->
</body>
</html>
"""
