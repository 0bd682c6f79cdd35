import asyncio

from civic_client.screens.home_screen import HomeScreen
from civic_client.services.interaction import ROUTE_REPORT
from civic_client.services.live_updates import ISSUE_UPDATED, NEW_ISSUE
from tests.conftest import FakeApiClient, FakeLiveUpdates, ScriptedDevice, make_issue, server_error


def make_screen(session, device, alerter, navigator, client):
    return HomeScreen(session, client, device, alerter, navigator, live_updates_factory=FakeLiveUpdates)


def test_mount_loads_everything_and_connects(citizen_session, device, alerter, navigator):
    client = FakeApiClient([make_issue(1, status="resolved"), make_issue(2)], total=10)
    screen = make_screen(citizen_session, device, alerter, navigator, client)

    asyncio.run(screen.mount())

    assert screen.loading is False
    assert screen.greeting == "Welcome, Arun"
    assert screen.location.latitude == 11.0168
    assert len(screen.issues) == 2
    assert (screen.stats.total_issues, screen.stats.resolved_issues, screen.stats.pending_issues) == (10, 1, 9)
    assert client.calls_to("list_issues") == [("list_issues", None, None)] * 2

    live, = FakeLiveUpdates.instances
    assert live.base_url == "http://api.test"
    assert live.connected is True


def test_status_push_patches_one_issue_without_refetch(citizen_session, device, alerter, navigator):
    client = FakeApiClient([make_issue(4), make_issue(5), make_issue(6)])
    screen = make_screen(citizen_session, device, alerter, navigator, client)

    async def scenario():
        await screen.mount()
        client.calls.clear()
        await FakeLiveUpdates.instances[0].emit(ISSUE_UPDATED, {"issue_id": 5, "status": "resolved"})

    asyncio.run(scenario())

    assert [(i.id, i.status) for i in screen.issues] == [(4, "reported"), (5, "resolved"), (6, "reported")]
    assert client.calls == []


def test_each_new_issue_push_refetches_once(citizen_session, device, alerter, navigator):
    client = FakeApiClient([make_issue(1)])
    screen = make_screen(citizen_session, device, alerter, navigator, client)

    async def scenario():
        await screen.mount()
        client.calls.clear()
        live = FakeLiveUpdates.instances[0]
        client.issues.append(make_issue(2))
        await live.emit(NEW_ISSUE, {"id": 2})
        await live.emit(NEW_ISSUE, {"id": 3})

    asyncio.run(scenario())

    assert len(client.calls_to("list_issues")) == 2
    assert [i.id for i in screen.issues] == [1, 2]


def test_unmount_disconnects(citizen_session, device, alerter, navigator):
    screen = make_screen(citizen_session, device, alerter, navigator, FakeApiClient())

    async def scenario():
        await screen.mount()
        await screen.unmount()

    asyncio.run(scenario())

    assert FakeLiveUpdates.instances[0].disconnected is True
    assert screen.live is None


def test_denied_location_alerts_and_map_uses_default_center(anonymous_session, alerter, navigator):
    client = FakeApiClient([make_issue(1)])
    screen = make_screen(anonymous_session, ScriptedDevice(location_granted=False), alerter, navigator, client)

    asyncio.run(screen.mount())

    assert alerter.alerts == [("Permission denied", "Location permission is required to show nearby issues")]
    assert screen.greeting == "Welcome, Guest"
    view = screen.map_view()
    assert len(view.markers) == 1
    assert "marker-icon-2x-red.png" in screen.map_html()


def test_load_failure_alerts(citizen_session, device, alerter, navigator):
    client = FakeApiClient()
    client.fail["list_issues"] = server_error(503)
    screen = make_screen(citizen_session, device, alerter, navigator, client)

    asyncio.run(screen.mount())

    assert sorted(alerter.titles) == ["Error", "Error"]
    assert screen.issues == []
    assert screen.loading is False


def test_open_report_navigates(citizen_session, device, alerter, navigator):
    screen = make_screen(citizen_session, device, alerter, navigator, FakeApiClient())
    screen.open_report()
    assert navigator.current == ROUTE_REPORT


class WaitsForSocketDevice(ScriptedDevice):
    """Only answers with a position once the live socket is up."""

    async def get_current_position(self):
        async def socket_up():
            while not (FakeLiveUpdates.instances and FakeLiveUpdates.instances[0].connected):
                await asyncio.sleep(0.01)

        await asyncio.wait_for(socket_up(), timeout=1)
        return self.position


def test_socket_connects_while_initial_loads_run(citizen_session, alerter, navigator):
    screen = make_screen(citizen_session, WaitsForSocketDevice(), alerter, navigator, FakeApiClient([make_issue(1)]))

    asyncio.run(screen.mount())

    assert screen.location is not None
    assert FakeLiveUpdates.instances[0].connected is True
