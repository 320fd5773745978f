import pytest

from ldaputil.ad import DirectoryConfig
from ldaputil.ad.utils import decode_value, escape_ldap_filter_value, user_filter
from ldaputil.ad_utils import domain_to_base_dn, split_address, suffix_domain


@pytest.mark.parametrize(
    "address, expected",
    [
        ("dc1.corp.example:636", ("dc1.corp.example", 636)),
        ("dc1.corp.example", ("dc1.corp.example", 636)),
        ("10.0.0.5:3269", ("10.0.0.5", 3269)),
        ("[fd00::5]:636", ("fd00::5", 636)),
        ("[fd00::5]", ("fd00::5", 636)),
        ("fd00::5", ("fd00::5", 636)),
    ],
)
def test_split_address(address, expected):
    assert split_address(address) == expected


@pytest.mark.parametrize("address", ["", "dc1:", ":636", "dc1:ldaps", "dc1:70000", "[fd00::5", "[fd00::5]x"])
def test_split_address_rejects(address):
    with pytest.raises(ValueError):
        split_address(address)


def test_suffix_to_base_dn():
    assert suffix_domain("@corp.example") == "corp.example"
    assert domain_to_base_dn(suffix_domain("@corp.example")) == "DC=corp,DC=example"
    assert domain_to_base_dn("") == ""
    assert domain_to_base_dn("localdomain") == ""


def test_escape_filter_value():
    assert escape_ldap_filter_value("a*b(c)\\d\x00") == "a\\2ab\\28c\\29\\5cd\\00"
    assert escape_ldap_filter_value("j.doe") == "j.doe"


def test_user_filter():
    assert user_filter("jdoe") == "(&(objectClass=user)(sAMAccountName=jdoe))"
    assert user_filter("*)(cn=*") == "(&(objectClass=user)(sAMAccountName=\\2a\\29\\28cn=\\2a))"


def test_decode_value():
    assert decode_value(b"Jane") == "Jane"
    assert decode_value("Jane") == "Jane"
    assert decode_value(b"\xff") == "�"


def test_config_is_immutable_and_validated():
    cfg = DirectoryConfig(address="dc1:636", suffix="@corp.example")
    assert cfg.host == "dc1"
    assert cfg.port == 636
    assert cfg.tls_validate is True
    assert cfg.bind_principal("svc") == "svc@corp.example"
    with pytest.raises(AttributeError):
        cfg.address = "other:636"
    with pytest.raises(ValueError):
        DirectoryConfig(address="")
    with pytest.raises(ValueError):
        DirectoryConfig(address="dc1", timeout=0)
