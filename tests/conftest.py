from __future__ import annotations

import re

import pytest
from ldap3.core.exceptions import LDAPSocketOpenError

from ldaputil.ad import DirectoryClient, DirectoryConfig

SAM_RE = re.compile(r"\(sAMAccountName=([^)]*)\)")

JANE = {
    "objectClass": [b"top", b"person", b"organizationalPerson", b"user"],
    "cn": [b"Jane Doe"],
    "sAMAccountName": [b"jdoe"],
    "distinguishedName": [b"CN=Jane Doe,OU=Engineering,DC=corp,DC=example"],
    "memberOf": [
        b"CN=Admins,OU=Groups,DC=corp,DC=example",
        b"CN=VPN Users,OU=Groups,DC=corp,DC=example",
    ],
    "objectGUID": [b"\x8a\xff\x01"],
}


class FakeConnection:
    """Stands in for ldap3.Connection against a FakeDirectory."""

    def __init__(self, directory: "FakeDirectory", server, **kwargs) -> None:
        self.directory = directory
        self.server = server
        self.kwargs = kwargs
        self.closed = True
        self.bound = False
        self.user = None
        self.password = None
        self.authentication = None
        self.bind_calls = 0
        self.result: dict = {}
        self.response: list = []
        self.searches: list[dict] = []
        self.unbind_calls = 0

    def open(self) -> None:
        if self.directory.unreachable:
            raise LDAPSocketOpenError("socket connection error while opening: [Errno 111] Connection refused")
        self.closed = False

    def bind(self, read_server_info=True, controls=None) -> bool:
        self.bind_calls += 1
        if self.directory.bind_error is not None:
            raise self.directory.bind_error
        if self.directory.credentials.get(self.user) == self.password:
            self.bound = True
            self.result = {"result": 0, "description": "success", "message": ""}
            return True
        self.result = {
            "result": 49,
            "description": "invalidCredentials",
            "message": "80090308: LdapErr: DSID-0C09044E, comment: AcceptSecurityContext error, data 52e, v4563",
        }
        return False

    def search(self, search_base, search_filter, **kwargs) -> bool:
        self.searches.append(dict(kwargs, search_base=search_base, search_filter=search_filter))
        if self.directory.search_error is not None:
            raise self.directory.search_error
        if self.directory.search_result is not None:
            self.result = dict(self.directory.search_result)
            self.response = []
            return False

        m = SAM_RE.search(search_filter)
        wanted = m.group(1).encode() if m else None
        self.response = []
        for attrs in self.directory.entries:
            if wanted is not None and attrs.get("sAMAccountName") != [wanted]:
                continue
            self.response.append({
                "type": "searchResEntry",
                "dn": attrs["distinguishedName"][0].decode(),
                "raw_attributes": attrs,
                "attributes": {},
            })
        self.response.extend(self.directory.references)
        self.result = {"result": 0, "description": "success", "message": ""}
        return any(r["type"] == "searchResEntry" for r in self.response)

    def unbind(self) -> bool:
        self.unbind_calls += 1
        self.closed = True
        self.bound = False
        return True


class FakeDirectory:
    def __init__(self) -> None:
        self.credentials = {"svc@corp.example": "s3cret"}
        self.entries: list[dict] = [JANE]
        self.references: list[dict] = []
        self.unreachable = False
        self.search_result: dict | None = None
        self.bind_error: Exception | None = None
        self.search_error: Exception | None = None
        self.connections: list[FakeConnection] = []

    def connection(self, server, **kwargs) -> FakeConnection:
        conn = FakeConnection(self, server, **kwargs)
        self.connections.append(conn)
        return conn


@pytest.fixture
def directory(monkeypatch) -> FakeDirectory:
    d = FakeDirectory()
    monkeypatch.setattr("ldaputil.ad.client.Connection", d.connection)
    return d


@pytest.fixture
def cfg() -> DirectoryConfig:
    return DirectoryConfig(address="dc1.corp.example:636", suffix="@corp.example")


@pytest.fixture
def client(cfg, directory) -> DirectoryClient:
    return DirectoryClient(cfg)
