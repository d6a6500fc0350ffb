from __future__ import annotations

from rafc_session.bus import LogoutBus, ChannelTransport, StorageTransport
from rafc_session.channels import BroadcastHub, LocalBroadcastChannel, local_channel_factory
from rafc_session.storage import TabStorage, SharedStorage
from rafc_session.channels.factory import unsupported_channel_factory


def _noop() -> None:
    return None


def test_storage_transport_always_writes_a_new_value() -> None:
    shared = SharedStorage()
    storage = TabStorage(shared)
    transport = StorageTransport(storage, "rafc_forceLogout", lambda: 5000)

    transport.announce_logout()
    transport.announce_logout()
    storage.set_item("rafc_forceLogout", "9000")
    transport.announce_logout()

    assert storage.get_item("rafc_forceLogout") == "9001"


def test_storage_transport_reacts_to_other_tabs() -> None:
    shared = SharedStorage()
    received: list[str] = []
    transport = StorageTransport(TabStorage(shared), "rafc_forceLogout", lambda: 1)
    transport.open(lambda: received.append("logout"), _noop)

    TabStorage(shared).set_item("unrelated", "1")
    TabStorage(shared).set_item("rafc_forceLogout", "42")
    transport.close()
    TabStorage(shared).set_item("rafc_forceLogout", "43")

    assert received == ["logout"]


def test_channel_transport_routes_messages() -> None:
    hub = BroadcastHub()
    received: list[str] = []
    transport = ChannelTransport(local_channel_factory(hub), "rafc_bc")
    transport.open(lambda: received.append("logout"), lambda: received.append("ping"))
    peer = LocalBroadcastChannel(hub, "rafc_bc")

    peer.post_message("activityPing")
    peer.post_message("forceLogout")
    peer.post_message("somethingElse")

    assert received == ["ping", "logout"]
    assert transport.supported is True


def test_channel_transport_is_inert_when_unsupported() -> None:
    transport = ChannelTransport(unsupported_channel_factory, "rafc_bc")
    transport.open(_noop, _noop)

    transport.announce_logout()
    transport.close()

    assert transport.supported is False


def test_broadcast_hub_skips_the_sender_and_other_names() -> None:
    hub = BroadcastHub()
    got: dict[str, list[str]] = {"a": [], "b": [], "other": []}
    sender = LocalBroadcastChannel(hub, "rafc_bc")
    sender.on_message = got["a"].append
    receiver = LocalBroadcastChannel(hub, "rafc_bc")
    receiver.on_message = got["b"].append
    elsewhere = LocalBroadcastChannel(hub, "other")
    elsewhere.on_message = got["other"].append

    sender.post_message("forceLogout")

    assert got == {"a": [], "b": ["forceLogout"], "other": []}


class _BrokenTransport:
    def open(self, on_force_logout, on_activity_ping) -> None:
        raise RuntimeError("cannot open")

    def announce_logout(self) -> None:
        raise RuntimeError("cannot announce")

    def close(self) -> None:
        raise RuntimeError("cannot close")


def test_logout_bus_isolates_transport_failures() -> None:
    shared = SharedStorage()
    storage = TabStorage(shared)
    bus = LogoutBus([_BrokenTransport(), StorageTransport(storage, "rafc_forceLogout", lambda: 77)])

    bus.open(_noop, _noop)
    bus.announce_logout()
    bus.close()

    assert storage.get_item("rafc_forceLogout") == "77"
    assert bus.is_open is False
