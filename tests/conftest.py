"""
Pytest configuration and shared fixtures
"""

import subprocess

import pytest

from mac_changer.applier import AddressApplier
from mac_changer.changer import MacChanger
from mac_changer.config import InterfaceHandle
from mac_changer.settings import Settings


class FakeRunner:
    """Command runner recording invocations instead of executing them"""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.calls: list[list[str]] = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def run(self, cmd):
        self.calls.append(list(cmd))
        return subprocess.CompletedProcess(
            args=list(cmd),
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr
        )


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Runner whose commands always succeed"""
    return FakeRunner()


@pytest.fixture
def failing_runner() -> FakeRunner:
    """Runner whose commands fail like ifconfig on a missing interface"""
    return FakeRunner(
        returncode=1,
        stderr="SIOCSIFHWADDR: No such device\n"
    )


@pytest.fixture
def eth0() -> InterfaceHandle:
    """Interface handle with a known starting address"""
    return InterfaceHandle(name="eth0", hw_address="de:ad:be:ef:00:01")


@pytest.fixture
def fixed_settings() -> Settings:
    """Settings requesting a fixed address on eth0"""
    return Settings(iface="eth0", address="11:22:33:44:55:66")


@pytest.fixture
def linux_applier(fake_runner) -> AddressApplier:
    return AddressApplier("linux", runner=fake_runner)


@pytest.fixture
def changer(eth0, fixed_settings, linux_applier) -> MacChanger:
    """Changer wired to a recording runner on a Linux host"""
    return MacChanger(eth0, fixed_settings, linux_applier)
