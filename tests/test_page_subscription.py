from nicegui_app import follow_dashboard_state
from src.state import DashboardState


class FakeClient:
    """Stands in for a NiceGUI client: records lifecycle handlers and entered contexts."""

    def __init__(self) -> None:
        self.disconnect_handlers = []
        self.delete_handlers = []
        self.entered = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, *exc) -> None:
        return None

    def on_disconnect(self, handler) -> None:
        self.disconnect_handlers.append(handler)

    def on_delete(self, handler) -> None:
        self.delete_handlers.append(handler)

    def drop_socket(self) -> None:
        for handler in self.disconnect_handlers:
            handler()

    def delete(self) -> None:
        for handler in self.delete_handlers:
            handler()


class FakeView:
    def __init__(self) -> None:
        self.refreshes = 0

    def refresh(self) -> None:
        self.refreshes += 1


def test_publish_refreshes_view_inside_client(snapshot) -> None:
    state, client, view = DashboardState(), FakeClient(), FakeView()
    follow_dashboard_state(state, client, view)

    state.publish_ready(snapshot)

    assert view.refreshes == 1
    assert client.entered == 1


def test_socket_drop_keeps_page_subscribed(snapshot) -> None:
    state, client, view = DashboardState(), FakeClient(), FakeView()
    follow_dashboard_state(state, client, view)

    client.drop_socket()
    state.publish_ready(snapshot)
    state.publish_failed("boom")

    assert view.refreshes == 2


def test_deleted_client_stops_following_state(snapshot) -> None:
    state, client, view = DashboardState(), FakeClient(), FakeView()
    follow_dashboard_state(state, client, view)

    client.delete()
    state.publish_ready(snapshot)

    assert view.refreshes == 0
