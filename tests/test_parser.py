import gzip
import logging
import zipfile

from dmarc_analyzer.parsers.dmarc_parser import (
    extract_xml_documents,
    find_report_files,
    load_reports,
    parse_dmarc_report,
    parse_zip_filename,
)
from tests.helpers import BEGIN, ONE_DAY_END, make_xml


def test_parse_dmarc_report_fields():
    report = parse_dmarc_report(make_xml(report_id='12345'), 'archive.zip', 'doc.xml')

    assert report.report_id == '12345'
    assert report.org_name == 'google.com'
    assert report.domain == 'example.com'
    assert report.source_zip == 'archive.zip'
    assert report.source_file == 'doc.xml'
    assert (report.date_range.begin, report.date_range.end) == (BEGIN, ONE_DAY_END)
    assert report.policy.p == 'quarantine'
    assert report.policy.sp == 'quarantine'
    assert report.policy.pct == 100
    assert len(report.records) == 2

    passing, failing = report.records
    assert passing.source_ip == '209.85.220.41'
    assert passing.count == 3
    assert passing.dkim_domain == 'example.com'
    assert passing.reason is None
    assert failing.disposition == 'quarantine'
    assert failing.reason == 'forwarded'
    assert failing.comment == 'looks forwarded'
    assert failing.header_from == 'news.example.com'
    assert failing.dkim_domain is None
    assert failing.spf_domain == 'bounce.example.net'


def test_parse_accepts_text_input():
    assert parse_dmarc_report(make_xml().decode('utf-8')) is not None


def test_parse_namespaced_report():
    xml = make_xml().replace(b'<feedback>', b'<feedback xmlns="urn:ietf:params:xml:ns:dmarc-2.0">')

    report = parse_dmarc_report(xml)

    assert report is not None
    assert report.domain == 'example.com'
    assert len(report.records) == 2


def test_malformed_xml_returns_none(caplog):
    with caplog.at_level(logging.ERROR):
        assert parse_dmarc_report(b'<feedback><report_metadata>', source_file='bad.xml') is None
    assert 'bad.xml' in caplog.text


def test_empty_content_returns_none():
    assert parse_dmarc_report(b'') is None


def test_missing_required_elements_return_none():
    assert parse_dmarc_report(b'<feedback><policy_published><domain>x</domain></policy_published></feedback>') is None
    no_dates = make_xml().replace(b'<begin>', b'<start>').replace(b'</begin>', b'</start>')
    assert parse_dmarc_report(no_dates) is None


def test_inverted_date_range_is_rejected():
    assert parse_dmarc_report(make_xml(begin=ONE_DAY_END, end=BEGIN)) is None


def test_negative_count_is_rejected():
    assert parse_dmarc_report(make_xml().replace(b'<count>2</count>', b'<count>-2</count>')) is None


def test_entity_declarations_are_refused():
    xml = (b'<?xml version="1.0"?><!DOCTYPE feedback [<!ENTITY x "boom">]>'
           b'<feedback><report_metadata><org_name>&x;</org_name></report_metadata></feedback>')
    assert parse_dmarc_report(xml) is None


def test_parse_zip_filename_providers():
    google = parse_zip_filename('/reports', 'google.com!example.com!1700000000!1700086399.zip')
    assert google['provider'] == 'google'
    assert google['timestamp'] == 1700000000
    assert google['path'] == '/reports/google.com!example.com!1700000000!1700086399.zip'

    yahoo = parse_zip_filename('/reports', 'yahoo.com-example.com-1700100000-1700186399.xml.gz')
    assert (yahoo['provider'], yahoo['timestamp']) == ('yahoo', 1700100000)

    microsoft = parse_zip_filename('/reports', 'outlook.com_example.com_1700200000_1700286399.zip')
    assert (microsoft['provider'], microsoft['timestamp']) == ('microsoft', 1700200000)

    other = parse_zip_filename('/reports', 'something-else.xml')
    assert (other['provider'], other['timestamp']) == ('unknown', 0)


def test_extract_from_zip_with_plain_and_gzipped_members(tmp_path):
    archive = tmp_path / 'bundle.zip'
    with zipfile.ZipFile(archive, 'w') as zf:
        zf.writestr('first.xml', make_xml(report_id='a'))
        zf.writestr('nested/second.xml.gz', gzip.compress(make_xml(report_id='b')))

    documents = list(extract_xml_documents(str(archive)))

    assert [name for name, _ in documents] == ['first.xml', 'second.xml.gz']
    assert documents[1][1] == make_xml(report_id='b')


def test_load_reports_from_mixed_files(tmp_path):
    with zipfile.ZipFile(tmp_path / 'google.com!example.com!1700000000!1700086399.zip', 'w') as zf:
        zf.writestr('google.xml', make_xml(report_id='zip-plain'))
        zf.writestr('google.xml.gz', gzip.compress(make_xml(report_id='zip-gz')))
    (tmp_path / 'plain.xml').write_bytes(make_xml(report_id='plain'))
    (tmp_path / 'single.xml.gz').write_bytes(gzip.compress(make_xml(report_id='gz')))
    (tmp_path / 'notes.txt').write_text('ignored')

    reports = load_reports(str(tmp_path))

    by_id = {r.report_id: r for r in reports}
    assert set(by_id) == {'zip-plain', 'zip-gz', 'plain', 'gz'}
    assert by_id['zip-gz'].source_zip == 'google.com!example.com!1700000000!1700086399.zip'
    assert by_id['zip-gz'].source_file == 'google.xml.gz'
    assert by_id['plain'].source_zip is None
    assert by_id['gz'].source_file == 'single.xml.gz'


def test_load_reports_sorts_by_filename_timestamp(tmp_path):
    (tmp_path / 'google.com!example.com!1700100000!1700186399.xml').write_bytes(make_xml(report_id='late'))
    (tmp_path / 'yahoo.com-example.com-1700000000-1700086399.xml').write_bytes(make_xml(report_id='early'))

    assert [r.report_id for r in load_reports(str(tmp_path))] == ['early', 'late']
    assert [r.report_id for r in load_reports(str(tmp_path), sort_by_timestamp=False)] == ['late', 'early']


def test_load_reports_skips_broken_files(tmp_path, caplog):
    (tmp_path / 'broken.zip').write_bytes(b'not a zip')
    (tmp_path / 'broken.xml.gz').write_bytes(b'not gzip either')
    (tmp_path / 'bad.xml').write_bytes(b'<feedback>')
    (tmp_path / 'good.xml').write_bytes(make_xml(report_id='ok'))

    with caplog.at_level(logging.ERROR):
        reports = load_reports(str(tmp_path))

    assert [r.report_id for r in reports] == ['ok']
    assert 'broken.zip' in caplog.text


def test_find_report_files_has_no_duplicates(tmp_path):
    (tmp_path / 'a.xml').write_bytes(b'')
    (tmp_path / 'b.xml.gz').write_bytes(b'')
    (tmp_path / 'c.zip').write_bytes(b'')

    files = find_report_files(str(tmp_path))

    assert sorted(p.rsplit('/', 1)[-1] for p in files) == ['a.xml', 'b.xml.gz', 'c.zip']
