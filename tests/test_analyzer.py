from dmarc_analyzer.analysis.analyzer import (
    NOT_APPLICABLE,
    analyze_reports,
    generate_trend_data,
    is_passed,
    percentage,
    ratio,
    report_day_count,
)
from dmarc_analyzer.analysis.models import DateRange, DmarcReport, PublishedPolicy
from dmarc_analyzer.policy.records import DomainAuthRecords
from dmarc_analyzer.utils.bigdecimal import ZERO
from tests.helpers import BEGIN, ONE_DAY_END, make_report, make_row


def test_single_day_dkim_pass():
    report = make_report([make_row(count=100, dkim='pass', spf='fail')])

    result = analyze_reports([report])

    assert result.passed_messages == 100
    assert result.failed_messages == 0
    assert result.domain_alignment.dkim_aligned == 100
    assert len(result.trends) == 1
    point = result.trends[0]
    assert (point.passed, point.failed, point.total) == (100, 0, 100)
    assert point.pass_rate == '100.00'
    assert point.date == '2023-11-14'


def test_two_day_report_spreads_and_floors_counts():
    report = make_report([make_row(count=101, dkim='fail', spf='pass')], end=BEGIN + 86400)

    assert report_day_count(report) == 2
    trends = generate_trend_data([report])

    assert [t.date for t in trends] == ['2023-11-14', '2023-11-15']
    assert [t.total for t in trends] == [50, 50]
    assert [t.passed for t in trends] == [50, 50]


def test_trend_days_from_several_reports_are_merged_and_sorted():
    later = make_report([make_row(count=4, dkim='fail', spf='fail')],
                        begin=BEGIN + 86400, end=BEGIN + 86400 + 86399)
    earlier = make_report([make_row(count=6)])

    trends = generate_trend_data([later, earlier])

    assert [t.date for t in trends] == ['2023-11-14', '2023-11-15']
    assert trends[1].failed == 4
    assert trends[1].pass_rate == '0.00'


def test_trend_day_without_messages_has_no_rate():
    trends = generate_trend_data([make_report([make_row(count=0)])])
    assert trends[0].pass_rate == NOT_APPLICABLE


def test_arc_override_counts_as_pass():
    row = make_row(count=7, dkim='fail', spf='fail', reason='local_policy', comment='arc=pass as.1.google.com')

    result = analyze_reports([make_report([row])])

    assert is_passed(row)
    assert result.passed_messages == 7
    assert result.domain_alignment.arc_aligned == 7
    assert result.domain_alignment.spf_aligned == 7
    assert result.domain_alignment.none_aligned == 0
    assert result.failure_details == []


def test_local_policy_without_arc_comment_fails():
    assert not is_passed(make_row(dkim='fail', spf='fail', reason='local_policy'))
    assert not is_passed(make_row(dkim='fail', spf='fail', reason='forwarded', comment='arc=pass'))


def test_alignment_buckets():
    rows = [
        make_row(count=1, dkim='pass', spf='pass'),
        make_row(count=2, dkim='pass', spf='fail'),
        make_row(count=3, dkim='fail', spf='pass'),
        make_row(count=4, dkim='fail', spf='fail'),
    ]

    result = analyze_reports([make_report(rows)])
    alignment = result.domain_alignment

    assert (alignment.both_aligned, alignment.dkim_aligned, alignment.spf_aligned) == (1, 2, 3)
    assert alignment.none_aligned == 4
    assert result.rates['both_aligned'] == '10.00'
    assert result.rates['none_aligned'] == '40.00'
    assert result.rates['pass'] == '60.00'
    assert result.rates['fail'] == '40.00'


def test_top_failing_sources_ranked_by_count():
    rows = [
        make_row(source_ip='1.2.3.4', count=50, dkim='fail', spf='fail', disposition='quarantine'),
        make_row(source_ip='5.6.7.8', count=200, dkim='fail', spf='fail', disposition='reject'),
        make_row(source_ip='1.2.3.4', count=5, dkim='fail', spf='fail', disposition='reject'),
    ]

    result = analyze_reports([make_report(rows)])
    top = result.top_failing_sources

    assert [s.ip for s in top] == ['5.6.7.8', '1.2.3.4']
    assert top[1].count == 55
    assert top[1].disposition == 'quarantine'
    assert top[0].risk_level == 'high'
    assert top[0].provider == 'Unknown'


def test_top_failing_sources_limited_to_ten():
    rows = [make_row(source_ip=f'198.51.100.{i}', count=i + 1, dkim='fail', spf='fail') for i in range(15)]

    top = analyze_reports([make_report(rows)]).top_failing_sources

    assert len(top) == 10
    assert top[0].ip == '198.51.100.14'


def test_failing_sources_are_enriched():
    rows = [
        make_row(source_ip='209.85.220.41', dkim='fail', spf='fail'),
        make_row(source_ip='192.168.1.20', dkim='fail', spf='fail'),
    ]

    details = analyze_reports([make_report(rows)]).failure_details

    assert (details[0].provider, details[0].risk_level) == ('Google', 'low')
    assert (details[1].provider, details[1].risk_level) == ('Unknown', 'medium')


def test_failure_details_carry_report_identity():
    row = make_row(count=2, dkim='fail', spf='fail', disposition='quarantine', reason='forwarded', comment='list')
    report = make_report([row], report_id='abc', source_zip=None, source_file='one.xml')

    detail = analyze_reports([report]).failure_details[0]

    assert detail.report_id == 'abc'
    assert detail.source_zip == 'unknown'
    assert detail.source_file == 'one.xml'
    assert detail.reason == 'forwarded'
    assert detail.comment == 'list'
    assert detail.date_range == report.date_range


def test_subdomains_failure_reasons_and_dispositions():
    rows = [
        make_row(count=3, header_from='news.example.com'),
        make_row(count=2, header_from='news.example.com', dkim='fail', spf='fail',
                 disposition='quarantine', reason='forwarded'),
        make_row(count=1, dkim='fail', spf='fail', disposition='reject', reason='forwarded'),
        make_row(count=4),
    ]

    result = analyze_reports([make_report(rows)])

    news = result.subdomain_analysis['news.example.com']
    assert (news.passed, news.failed) == (3, 2)
    assert 'example.com' not in result.subdomain_analysis
    assert result.failure_reasons == {'forwarded': 3}
    assert result.quarantined_messages == 2
    assert result.rejected_messages == 1
    assert result.rates['quarantine'] == '20.00'


def test_orgs_domains_volume_and_date_range():
    reports = [
        make_report([make_row(count=5)], domain='b.example', org_name='Yahoo', begin=BEGIN + 86400,
                    end=BEGIN + 2 * 86400),
        make_report([make_row(count=7)], domain='a.example', org_name='google.com'),
        make_report([make_row(count=1)], domain='b.example', org_name='Yahoo', end=ONE_DAY_END + 10),
    ]

    result = analyze_reports(reports)

    assert result.total_reports == 3
    assert result.unique_analyzed_domains == ['b.example', 'a.example']
    assert result.reporting_orgs == ['Yahoo', 'google.com']
    assert result.volume_by_provider == {'Yahoo': 6, 'google.com': 7}
    assert result.date_range.earliest == BEGIN
    assert result.date_range.latest == BEGIN + 2 * 86400


def test_lookup_called_once_per_domain_in_first_seen_order():
    calls = []

    def lookup(domain):
        calls.append(domain)
        return DomainAuthRecords(domain=domain)

    reports = [
        make_report([make_row()], domain='b.example'),
        make_report([make_row()], domain='a.example'),
        make_report([make_row()], domain='b.example'),
    ]

    result = analyze_reports(reports, lookup=lookup)

    assert calls == ['b.example', 'a.example']
    assert [r.domain for r in result.domain_auth_records] == ['b.example', 'a.example']


def test_no_lookup_leaves_records_empty():
    assert analyze_reports([make_report([make_row()])]).domain_auth_records == []


def test_empty_analysis_reports_not_applicable_rates():
    result = analyze_reports([])

    assert result.total_messages == 0
    assert result.trends == []
    assert result.date_range.earliest is None
    assert set(result.rates.values()) == {NOT_APPLICABLE}


def test_percentage_formatting():
    assert percentage(1, 4) == '25.00'
    assert percentage(1, 3) == '33.33'
    assert percentage(2, 3) == '66.66'
    assert percentage(0, 5) == '0.00'
    assert percentage(5, 0) == NOT_APPLICABLE
    assert percentage(1, 8, places=3) == '12.500'


def test_failure_and_quarantine_ratios():
    rows = [
        make_row(count=5),
        make_row(count=3, dkim='fail', spf='fail', disposition='reject'),
        make_row(count=2, dkim='fail', spf='fail', disposition='quarantine'),
    ]

    result = analyze_reports([make_report(rows)])

    assert result.fail_ratio.eq('0.5')
    assert result.quarantine_ratio.eq('0.2')
    assert result.rates['reject'] == '30.00'
    assert result.rates['quarantine'] == '20.00'


def test_ratios_are_zero_without_messages():
    result = analyze_reports([make_report([])])

    assert result.fail_ratio is ZERO
    assert result.quarantine_ratio is ZERO
    assert result.rates['reject'] == NOT_APPLICABLE
    assert ratio(3, 0) is ZERO
    assert ratio(1, 3).to_fixed(4) == '0.3333'


def test_report_source_names_are_optional():
    report = DmarcReport(
        domain='example.com',
        org_name='google.com',
        email='noreply-dmarc-support@google.com',
        report_id='r9',
        date_range=DateRange(begin=BEGIN, end=ONE_DAY_END),
        policy=PublishedPolicy(domain='example.com'),
    )

    assert report.source_zip is None
    assert report.source_file is None
    assert report.records == ()
