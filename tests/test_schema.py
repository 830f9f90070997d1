"""Tests for resource schemas, validation and ResourceData."""

import copy

import pytest

from squadcast_provider.errors import ResourceError
from squadcast_provider.tf import (
    UNKNOWN,
    Attribute,
    Block,
    Resource,
    Type,
    has_errors,
    int_between,
)


@pytest.fixture
def resource():
    return Resource(
        description="test resource",
        read=lambda d, c: None,
        create=lambda d, c: None,
        schema={
            "id": Attribute(Type.STRING, computed=True),
            "name": Attribute(Type.STRING, required=True),
            "color": Attribute(Type.STRING, optional=True, default="#0f61dd"),
            "size": Attribute(Type.INT, optional=True, validators=[int_between(1, 10)]),
            "team_id": Attribute(Type.STRING, required=True, force_new=True),
            "public_url": Attribute(Type.STRING, computed=True),
            "labels": Attribute(Type.MAP, optional=True, elem=Attribute(Type.STRING)),
            "emails": Attribute(Type.SET, optional=True, elem=Attribute(Type.STRING)),
            "slots": Attribute(
                Type.LIST,
                optional=True,
                min_items=1,
                max_items=2,
                elem=Block({
                    "hour": Attribute(Type.INT, required=True, validators=[int_between(0, 23)]),
                    "day": Attribute(Type.STRING, optional=True, default="monday"),
                }),
            ),
        },
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidate:
    def test_valid_config(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "slots": [{"hour": 3}]})
        assert diags == []

    def test_missing_required(self, resource):
        diags = resource.validate({"name": "x"})
        assert has_errors(diags)
        assert diags[0].attribute == "team_id"
        assert "required" in diags[0].summary

    def test_unexpected_argument(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "bogus": 1})
        assert [d.attribute for d in diags] == ["bogus"]

    def test_computed_attribute_is_not_configurable(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "public_url": "u"})
        assert "unconfigurable" in diags[0].summary

    def test_validator_runs_on_coerced_value(self, resource):
        assert resource.validate({"name": "x", "team_id": "t", "size": "5"}) == []
        diags = resource.validate({"name": "x", "team_id": "t", "size": 11})
        assert "range" in diags[0].summary

    def test_type_mismatch(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "size": "big"})
        assert "Incorrect attribute value type" in diags[0].summary

    def test_nested_block_errors_carry_path(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "slots": [{"hour": 30}]})
        assert diags[0].attribute == "slots.0.hour"

    def test_item_limits(self, resource):
        too_few = resource.validate({"name": "x", "team_id": "t", "slots": []})
        too_many = resource.validate({"name": "x", "team_id": "t", "slots": [{"hour": 1}] * 3})
        assert "minimum" in too_few[0].summary
        assert "maximum" in too_many[0].summary

    def test_set_duplicates(self, resource):
        diags = resource.validate({"name": "x", "team_id": "t", "emails": ["a", "a"]})
        assert "duplicate" in diags[0].summary

    def test_unknown_values_are_not_validated(self, resource):
        assert resource.validate({"name": UNKNOWN, "team_id": UNKNOWN, "size": UNKNOWN}) == []


# ---------------------------------------------------------------------------
# Defaults and normalization
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_apply_defaults_fills_top_level_and_nested(self, resource):
        config = {"name": "x", "slots": [{"hour": 1}]}
        result = resource.apply_defaults(config)
        assert result["color"] == "#0f61dd"
        assert result["slots"] == [{"hour": 1, "day": "monday"}]
        assert "day" not in config["slots"][0]

    def test_force_new_attributes(self, resource):
        assert resource.force_new_attributes() == {"team_id"}

    def test_normalize_block_keeps_declared_keys(self):
        block = Block({"a": Attribute(Type.INT, optional=True), "b": Attribute(Type.STRING, optional=True)})
        assert block.normalize({"a": "3", "zzz": 1}) == {"a": 3, "b": ""}

    def test_normalize_keeps_unknown(self):
        assert Attribute(Type.STRING).normalize(UNKNOWN) is UNKNOWN

    def test_unknown_survives_deepcopy(self):
        assert copy.deepcopy({"a": UNKNOWN})["a"] is UNKNOWN
        assert repr(UNKNOWN) == "(known after apply)"


# ---------------------------------------------------------------------------
# ResourceData
# ---------------------------------------------------------------------------


class TestResourceData:
    def test_get_precedence(self, resource):
        data = resource.data(config={"name": "config"}, state={"name": "state", "public_url": "u"})
        assert data.get("name") == "config"
        assert data.get("public_url") == "u"
        data.set("name", "set")
        assert data.get("name") == "set"

    def test_get_defaults_and_zero_values(self, resource):
        data = resource.data(config={"name": "x"})
        assert data.get("color") == "#0f61dd"
        assert data.get("size") == 0
        assert data.get("labels") == {}

    def test_get_ok(self, resource):
        data = resource.data(config={"name": "x"})
        assert data.get_ok("name") == ("x", True)
        assert data.get_ok("size") == (0, False)

    def test_set_unknown_attribute(self, resource):
        with pytest.raises(ResourceError, match="Invalid address to set"):
            resource.data().set("nope", 1)

    def test_has_change(self, resource):
        data = resource.data(config={"name": "new", "team_id": "t"}, state={"name": "old", "team_id": "t"})
        assert data.has_change("name")
        assert not data.has_change("team_id")
        assert not data.has_change("public_url")

    def test_id_and_state(self, resource):
        data = resource.data(config={"name": "x", "team_id": "t"}, id="1")
        assert data.id() == "1"
        data.set_id("")
        assert data.id() == ""
        state = data.state()
        assert "id" not in state
        assert state["name"] == "x"
        assert state["slots"] == []

    def test_is_data_source(self, resource):
        assert not resource.is_data_source
        ds = Resource(description="ds", read=lambda d, c: None, schema={})
        assert ds.is_data_source
