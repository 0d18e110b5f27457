from __future__ import annotations

from typing import Any

import pytest
from dbus_fast import Message

from volpong import _bus
from volpong.config import PongConfig
from volpong.exceptions import BusConnectionError, FilterInstallError


class _FakeBus:
    def __init__(self, reply: Message | None | Exception = None, *, error: str | None = None) -> None:
        self.calls: list[Message] = []
        self._reply = reply
        self._error = error

    async def call(self, msg: Message) -> Message | None:
        self.calls.append(msg)
        # A live bus assigns the serial on send; replies need a non-zero one.
        msg.serial = msg.serial or 1
        if isinstance(self._reply, Exception):
            raise self._reply
        if self._error is not None:
            return Message.new_error(msg, self._error, "rule rejected")
        if self._reply is None:
            return None
        return self._reply


def test_match_rule_targets_publisher_signals() -> None:
    assert _bus.build_match_rule(PongConfig()) == "type='signal',sender='org.bluez'"
    assert _bus.build_match_rule(PongConfig(publisher="org.example")) == "type='signal',sender='org.example'"


@pytest.mark.asyncio
async def test_install_filter_sends_add_match_to_bus_daemon() -> None:
    request = Message(destination="org.freedesktop.DBus", path="/org/freedesktop/DBus", member="Hello", serial=1)
    bus = _FakeBus(Message.new_method_return(request))

    await _bus.install_filter(bus, "type='signal',sender='org.bluez'")

    assert len(bus.calls) == 1
    sent = bus.calls[0]
    assert sent.destination == "org.freedesktop.DBus"
    assert sent.path == "/org/freedesktop/DBus"
    assert sent.interface == "org.freedesktop.DBus"
    assert sent.member == "AddMatch"
    assert sent.signature == "s"
    assert list(sent.body) == ["type='signal',sender='org.bluez'"]


@pytest.mark.asyncio
async def test_install_filter_error_reply_raises() -> None:
    bus = _FakeBus(error="org.freedesktop.DBus.Error.MatchRuleInvalid")

    with pytest.raises(FilterInstallError) as excinfo:
        await _bus.install_filter(bus, "bogus")

    assert excinfo.value.error_name == "org.freedesktop.DBus.Error.MatchRuleInvalid"
    assert excinfo.value.rule == "bogus"


@pytest.mark.asyncio
async def test_install_filter_without_reply_raises() -> None:
    with pytest.raises(FilterInstallError, match="no reply"):
        await _bus.install_filter(_FakeBus(None), "type='signal'")


@pytest.mark.asyncio
async def test_install_filter_transport_failure_raises() -> None:
    with pytest.raises(FilterInstallError, match="request failed"):
        await _bus.install_filter(_FakeBus(BrokenPipeError("gone")), "type='signal'")


@pytest.mark.asyncio
async def test_connect_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    class _RefusingBus:
        def __init__(self, **_kwargs: Any) -> None:
            pass

        async def connect(self) -> _RefusingBus:
            raise ConnectionRefusedError("no daemon")

    monkeypatch.setattr(_bus, "MessageBus", _RefusingBus)

    with pytest.raises(BusConnectionError, match="system bus"):
        await _bus.connect(PongConfig())


@pytest.mark.asyncio
async def test_connect_uses_explicit_address(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}

    class _Bus:
        unique_name = ":1.42"

        def __init__(self, **kwargs: Any) -> None:
            seen.update(kwargs)

        async def connect(self) -> _Bus:
            return self

    monkeypatch.setattr(_bus, "MessageBus", _Bus)

    bus = await _bus.connect(PongConfig(bus_address="unix:path=/tmp/bus"))

    assert bus.unique_name == ":1.42"
    assert seen == {"bus_address": "unix:path=/tmp/bus"}

