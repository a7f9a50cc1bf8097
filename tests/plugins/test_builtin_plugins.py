"""Tests for the builtin plugins shipped in hostfacts.plugins."""

import platform
import sys
from unittest.mock import patch

import pytest

from hostfacts.core.fact_tree import FactTree
from hostfacts.plugins.hostname import Hostname
from hostfacts.plugins.kernel import Kernel
from hostfacts.plugins.languages import Languages
from hostfacts.plugins.python import Python

FAKE_UNAME = platform.uname_result("Linux", "box", "6.1.0-18-amd64", "#1 SMP Debian", "x86_64")


@pytest.fixture
def data():
    return FactTree()


class TestDeclarations:
    @pytest.mark.parametrize(
        "cls, provides, depends",
        [
            (Hostname, ("hostname", "fqdn", "machinename"), ()),
            (Kernel, ("kernel", "os", "os_version"), ()),
            (Languages, ("languages",), ()),
            (Python, ("languages/python",), ("languages",)),
        ],
    )
    def test_provides_and_depends(self, cls, provides, depends):
        assert cls.provides == provides
        assert cls.depends == depends


class TestHostname:
    @patch("hostfacts.plugins.hostname.socket.getfqdn", return_value="box.example.com")
    @patch("hostfacts.plugins.hostname.socket.gethostname", return_value="box.example.com")
    def test_collect(self, _gethostname, mock_getfqdn, data):
        Hostname(data).run()

        assert data["machinename"] == "box.example.com"
        assert data["hostname"] == "box"
        assert data["fqdn"] == "box.example.com"
        mock_getfqdn.assert_called_once_with("box.example.com")


class TestKernel:
    @patch("hostfacts.plugins.kernel.platform.uname", return_value=FAKE_UNAME)
    @patch("hostfacts.framework.plugin.current_platform", return_value="linux")
    def test_collect_default(self, _platform, _uname, data):
        Kernel(data).run()

        assert data["kernel"] == {
            "name": "Linux",
            "release": "6.1.0-18-amd64",
            "version": "#1 SMP Debian",
            "machine": "x86_64",
        }
        assert data["os"] == "linux"
        assert data["os_version"] == "6.1.0-18-amd64"

    @patch(
        "hostfacts.plugins.kernel.platform.uname",
        return_value=platform.uname_result("Windows", "box", "10", "10.0.19045", "AMD64"),
    )
    @patch("hostfacts.framework.plugin.current_platform", return_value="windows")
    def test_collect_windows(self, _platform, _uname, data):
        Kernel(data).run()

        assert data["os"] == "windows"
        assert data["os_version"] == "10.0.19045"


class TestLanguages:
    def test_creates_root(self, data):
        Languages(data).run()
        assert data["languages"] == {}

    def test_keeps_existing(self, data):
        data["languages/ruby"] = {"version": "3.3"}
        Languages(data).run()
        assert data["languages"] == {"ruby": {"version": "3.3"}}


class TestPython:
    def test_collect(self, data):
        Python(data).run()

        assert data["languages/python/version"] == platform.python_version()
        assert data["languages/python/implementation"] == platform.python_implementation()
        assert data["languages/python/executable"] == sys.executable
        assert data["languages/python/platform"] == sys.platform
