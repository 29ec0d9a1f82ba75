# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import pytest

from vmstorage.common import address


class TestHosttailSplit:

    @pytest.mark.parametrize("hosttail, expected", [
        ("1.2.3.4:4321", ("1.2.3.4", "4321")),
        ("[2001::1]:4321", ("2001::1", "4321")),
        ("TestHost:4321", ("TestHost", "4321")),
        ("FQDN.host:/export/a", ("FQDN.host", "/export/a")),
        ("FQDN.host:/path/a:b:c", ("FQDN.host", "/path/a:b:c")),
        ("[2001::1]:/a:b:c/path", ("2001::1", "/a:b:c/path")),
    ])
    def test_split(self, hosttail, expected):
        assert address.hosttail_split(hosttail) == expected

    @pytest.mark.parametrize("hosttail", [
        "bad hostname",
        "hostname:",
        ":123",
        "[2001::1]",
    ])
    def test_invalid(self, hosttail):
        with pytest.raises(address.HosttailError):
            address.hosttail_split(hosttail)

    def test_ipv6_no_brackets_returns_garbage(self):
        assert address.hosttail_split("2001::1:4321") != ("2001::1", "4321")


class TestHosttailJoin:

    @pytest.mark.parametrize("host, tail, expected", [
        ("server", "/", "server:/"),
        ("server", "/path", "server:/path"),
        ("12.34.56.78", "/path", "12.34.56.78:/path"),
        ("2001:db8::60fe:5bf:febc:912", "/path",
         "[2001:db8::60fe:5bf:febc:912]:/path"),
        ("[2001:db8::60fe:5bf:febc:912]", "/path",
         "[2001:db8::60fe:5bf:febc:912]:/path"),
    ])
    def test_join(self, host, tail, expected):
        assert address.hosttail_join(host, tail) == expected
