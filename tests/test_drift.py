"""Tests for drift detection between configuration and remote state."""

from squadcast_provider.engine import AttributeChange, detect_drift, requires_replace
from squadcast_provider.provider import (
    resource_runbook,
    resource_schedule,
    resource_schedule_v2,
    resource_webform,
)
from squadcast_provider.tf import UNKNOWN, Attribute, Resource, Type

from conftest import TEAM_ID

OTHER_TEAM = "0123456789abcdef01234567"


def runbook_state(**overrides):
    state = {"name": "Restart", "team_id": TEAM_ID, "steps": [{"content": "restart"}]}
    state.update(overrides)
    return state


class TestDetectDrift:
    def test_no_changes(self):
        assert detect_drift(resource_runbook.resource, runbook_state(), runbook_state()) == []

    def test_changed_attribute(self):
        changes = detect_drift(resource_runbook.resource, runbook_state(name="Reboot"), runbook_state())
        assert changes == [AttributeChange(name="name", before="Restart", after="Reboot", force_new=False)]
        assert not requires_replace(changes)

    def test_force_new_attribute(self):
        changes = detect_drift(resource_runbook.resource, runbook_state(team_id=OTHER_TEAM), runbook_state())
        assert [c.name for c in changes] == ["team_id"]
        assert requires_replace(changes)
        assert str(changes[0]).endswith("# forces replacement")

    def test_list_compares_element_wise(self):
        desired = runbook_state(steps=[{"content": "b"}, {"content": "a"}])
        state = runbook_state(steps=[{"content": "a"}, {"content": "b"}])
        assert [c.name for c in detect_drift(resource_runbook.resource, desired, state)] == ["steps"]

    def test_computed_attributes_are_ignored(self):
        desired = {
            "name": "Status", "team_id": TEAM_ID,
            "services": [{"service_id": "s1", "name": "API"}],
        }
        state = {
            **desired,
            "public_url": "https://forms.squadcast.com/1",
            "incident_count": 12,
            "services": [{"service_id": "s1", "name": "API", "alias": "", "webform_id": 1}],
        }
        changes = detect_drift(resource_webform.resource, desired, state)
        assert "public_url" not in [c.name for c in changes]
        assert "services" not in [c.name for c in changes]

    def test_unset_optional_computed_is_skipped(self):
        desired = {"name": "Primary", "team_id": TEAM_ID, "timezone": "UTC"}
        state = {**desired, "entity_owner": [{"type": "team", "id": TEAM_ID}]}
        assert detect_drift(resource_schedule_v2.resource, desired, state) == []

    def test_set_optional_computed_is_compared(self):
        desired = {
            "name": "Primary", "team_id": TEAM_ID, "timezone": "UTC",
            "entity_owner": [{"type": "user", "id": OTHER_TEAM}],
        }
        state = {**desired, "entity_owner": [{"type": "team", "id": TEAM_ID}]}
        assert [c.name for c in detect_drift(resource_schedule_v2.resource, desired, state)] == ["entity_owner"]

    def test_unset_optional_compares_as_zero_value(self):
        desired = {"name": "Primary", "team_id": TEAM_ID}
        state = {**desired, "color": "#0f61dd"}
        assert detect_drift(resource_schedule.resource, desired, {**state, "description": ""}) == []
        changes = detect_drift(resource_schedule.resource, desired, {**state, "description": "edited"})
        assert changes[0].name == "description"
        assert changes[0].after == ""

    def test_defaults_are_applied_before_comparing(self):
        desired = {"name": "Primary", "team_id": TEAM_ID}
        state = {**desired, "color": "#0f61dd"}
        assert detect_drift(resource_schedule.resource, desired, state) == []

    def test_unknown_value_is_a_change(self):
        changes = detect_drift(resource_runbook.resource, runbook_state(team_id=UNKNOWN), runbook_state())
        assert changes[0].after is UNKNOWN
        assert changes[0].force_new

    def test_sets_compare_unordered(self):
        resource = Resource(
            description="r",
            read=lambda d, c: None,
            schema={"emails": Attribute(Type.SET, optional=True, elem=Attribute(Type.STRING))},
        )
        assert detect_drift(resource, {"emails": ["a", "b"]}, {"emails": ["b", "a"]}) == []
        assert detect_drift(resource, {"emails": ["a"]}, {"emails": ["b", "a"]}) != []

    def test_missing_state_reports_every_configured_attribute(self):
        changes = detect_drift(resource_runbook.resource, runbook_state(), {})
        assert {c.name for c in changes} == {"name", "team_id", "steps"}
