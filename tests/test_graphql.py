"""Tests for GraphQL operation building."""

import pytest

from squadcast_provider.api import build_operation, selection_set
from squadcast_provider.api.graphql import field_name
from squadcast_provider.api.rotations import Rotation, ScheduleWithRotations
from squadcast_provider.api.schedules import ScheduleV2


class TestSelectionSet:
    def test_uses_json_names_and_nests_models(self):
        assert selection_set(ScheduleV2) == (
            "{ ID name description timeZone teamID tags { key value color } owner { ID type } }"
        )

    def test_nested_lists_of_models(self):
        s = selection_set(Rotation)
        assert "participantGroups { participants { ID type } everyone }" in s
        assert "shiftTimeSlots { startHour startMinute duration dayOfWeek }" in s

    def test_inherited_fields(self):
        s = selection_set(ScheduleWithRotations)
        assert s.startswith("{ ID name")
        assert "rotations { ID scheduleID" in s


class TestBuildOperation:
    def test_mutation_with_variables(self):
        op = build_operation("mutation", "deleteSchedule(ID: $ID)", ScheduleV2, {"ID": "Int!"})
        assert op.startswith("mutation ($ID: Int!) { deleteSchedule(ID: $ID) { ID name")
        assert op.endswith("} }")

    def test_query_without_variables(self):
        op = build_operation("query", "schedules", ScheduleV2, {})
        assert op.startswith("query { schedules { ID")

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown GraphQL operation kind"):
            build_operation("subscription", "x", ScheduleV2, {})

    def test_field_name(self):
        assert field_name("createRotation(scheduleID: $scheduleID, input: $input)") == "createRotation"
        assert field_name("schedules") == "schedules"
