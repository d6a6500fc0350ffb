from __future__ import annotations

import pytest

from rafc_session.page.router import HistoryRouter


def test_navigate_pushes_and_replace_swaps_the_top_entry() -> None:
    router = HistoryRouter("/admin")
    router.navigate("/admin/pagos")
    router.navigate_replace("/login")

    assert router.history == ("/admin", "/login")
    assert router.back() == "/admin"


def test_replacing_with_the_current_path_is_a_noop() -> None:
    router = HistoryRouter("/login")

    assert router.navigate_replace("/login") is False
    assert router.history == ("/login",)


def test_navigate_keeps_state() -> None:
    router = HistoryRouter()
    router.navigate("/login", state={"from": "/admin/agenda"})

    assert router.current_state == {"from": "/admin/agenda"}


def test_relative_targets_are_rejected() -> None:
    with pytest.raises(ValueError):
        HistoryRouter().navigate("admin")
