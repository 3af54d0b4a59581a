import pytest

from xplane_udp.health import HealthReporter


@pytest.mark.asyncio
async def test_health_reporter_snapshot():
    reporter = HealthReporter()

    await reporter.update("xplane", True, counters={"sent": 2, "received": 5})
    await reporter.update("health", False, "stopped")

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    component_list = snapshot.get("components", [])
    assert isinstance(component_list, list)
    components = {item["name"]: item for item in component_list}
    assert components["xplane"]["healthy"] is True
    assert components["xplane"]["counters"] == {"sent": 2, "received": 5}
    assert components["health"]["detail"] == "stopped"
    assert "counters" not in components["health"]


@pytest.mark.asyncio
async def test_health_reporter_monitor_state_affects_status():
    reporter = HealthReporter()

    await reporter.update("xplane", True)
    await reporter.set_monitor_state("starting", healthy=False)

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    state = snapshot.get("monitorState")
    assert state is not None
    assert state["state"] == "starting"
    assert state["healthy"] is False

    await reporter.set_monitor_state("subscribed", healthy=True, detail="1 dataref(s)")
    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "ok"
    assert snapshot["monitorState"]["state"] == "1 dataref(s)"

