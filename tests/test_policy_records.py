import pytest

from dmarc_analyzer.policy.records import parse_dkim_record, parse_dmarc_record, parse_spf_record


def test_spf_record_parts():
    spf = parse_spf_record('v=spf1 include:_spf.google.com ip4:192.0.2.0/24 redirect=_spf.example.com -all')

    assert spf.valid
    assert spf.version == 'spf1'
    assert spf.mechanisms == ['include:_spf.google.com', 'ip4:192.0.2.0/24']
    assert spf.modifiers == {'redirect': '_spf.example.com'}
    assert spf.all == '-all'


def test_spf_without_all_mechanism():
    spf = parse_spf_record('v=spf1 mx')
    assert spf.valid
    assert spf.all is None
    assert spf.mechanisms == ['mx']


@pytest.mark.parametrize('record', ['', 'spf1 -all', 'v=DMARC1; p=none'])
def test_spf_rejects_records_without_version(record):
    spf = parse_spf_record(record)
    assert not spf.valid
    assert spf.error == 'Invalid SPF record (must start with v=spf1)'


def test_dkim_record():
    dkim = parse_dkim_record('v=DKIM1; k=rsa; p=MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQC1==')

    assert dkim.valid
    assert dkim.key_type == 'rsa'
    assert dkim.public_key == 'MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQC1=='


def test_dkim_key_type_defaults_to_rsa():
    dkim = parse_dkim_record('v=DKIM1; p=abc')
    assert dkim.valid
    assert dkim.key_type == 'rsa'


def test_dkim_errors():
    assert parse_dkim_record('k=rsa; p=abc').error == 'Invalid DKIM record (must start with v=DKIM1)'
    assert parse_dkim_record('v=DKIM1; k=rsa; p=').error == 'DKIM record missing public key (p=)'


def test_dmarc_record():
    dmarc = parse_dmarc_record(
        'v=DMARC1; p=reject; sp=quarantine; adkim=s; aspf=r; pct=50; '
        'rua=mailto:dmarc@example.com,mailto:agg@example.net; fo=1'
    )

    assert dmarc.valid
    assert dmarc.policy == 'reject'
    assert dmarc.subdomain_policy == 'quarantine'
    assert (dmarc.adkim, dmarc.aspf) == ('s', 'r')
    assert dmarc.pct == '50'
    assert dmarc.rua == ['mailto:dmarc@example.com', 'mailto:agg@example.net']
    assert dmarc.ruf is None
    assert dmarc.fo == '1'


def test_dmarc_tag_keys_are_case_insensitive():
    dmarc = parse_dmarc_record('V=DMARC1; P=none')
    assert dmarc.valid
    assert dmarc.policy == 'none'


def test_dmarc_errors():
    assert parse_dmarc_record('v=spf1 -all').error == 'Invalid DMARC record (must start with v=DMARC1)'
    assert parse_dmarc_record('v=DMARC1; rua=mailto:x@example.com').error == 'DMARC record missing policy (p=)'
