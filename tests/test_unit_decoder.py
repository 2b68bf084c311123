"""
Tests for decoding wire JSON into typed match rules.

Tests cover:
- Dispatch of every rule type literal to its model
- Missing, non-string and unknown rule discriminators
- objectMatchValue resolution and per-cloudlet allow-lists
- Null and absent field handling
- Fail-fast behaviour and rule order
"""

import json

import pytest

from cloudlets.codec.decoder import decode_match_rule, decode_match_rules
from cloudlets.core.errors import (
    InvalidDiscriminatorTypeError,
    MatchRulesDecodeError,
    MissingDiscriminatorError,
    ObjectMatchValueTypeError,
    UnsupportedRuleTypeError,
)
from cloudlets.schemas.match_rule import (
    MatchCriteriaER,
    MatchRuleAP,
    MatchRuleAS,
    MatchRuleER,
    MatchRuleFR,
    MatchRulePR,
    MatchRuleRC,
)
from cloudlets.schemas.object_match_value import (
    ObjectMatchValueObject,
    ObjectMatchValueObjectOptions,
    ObjectMatchValueRange,
    ObjectMatchValueSimple,
    resolve_object_match_value_type,
)


class TestRuleDispatch:
    """Tests for selecting the rule model from the type field."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "rule_type,model",
        [
            ("cdMatchRule", MatchRulePR),
            ("erMatchRule", MatchRuleER),
            ("frMatchRule", MatchRuleFR),
            ("apMatchRule", MatchRuleAP),
            ("asMatchRule", MatchRuleAS),
            ("igMatchRule", MatchRuleRC),
        ],
    )
    async def test_each_type_literal_decodes_to_its_model(self, rule_type, model):
        """Test that every supported literal selects its rule model."""
        rules = decode_match_rules(json.dumps([{"type": rule_type, "name": "rule"}]))

        assert len(rules) == 1
        assert type(rules[0]) is model
        assert rules[0].type == rule_type
        assert rules[0].name == "rule"

    @pytest.mark.anyio
    async def test_unsupported_type_is_rejected(self):
        """Test that an unknown literal names the offending value."""
        with pytest.raises(UnsupportedRuleTypeError) as exc_info:
            decode_match_rules('[{"type": "xxMatchRule"}]')

        assert str(exc_info.value) == "unmarshalling MatchRules: unsupported match rule type: xxMatchRule"
        assert exc_info.value.rule_type == "xxMatchRule"
        assert exc_info.value.index == 0

    @pytest.mark.anyio
    async def test_missing_type_names_rule_index(self):
        """Test that a rule without type reports its position."""
        payload = [{"type": "apMatchRule", "passThroughPercent": 10}, {"name": "no type"}]

        with pytest.raises(MissingDiscriminatorError) as exc_info:
            decode_match_rules(payload)

        assert exc_info.value.index == 1
        assert str(exc_info.value) == "unmarshalling MatchRules: match rule entry 1 should contain 'type' field"

    @pytest.mark.anyio
    async def test_non_string_type_is_rejected(self):
        """Test that a numeric type is a distinct error."""
        with pytest.raises(InvalidDiscriminatorTypeError) as exc_info:
            decode_match_rules('[{"type": 42}]')

        assert str(exc_info.value) == (
            "unmarshalling MatchRules: 'type' field on match rule entry should be a string"
        )

    @pytest.mark.anyio
    async def test_entry_that_is_not_an_object_is_rejected(self):
        """Test that array entries must be objects."""
        with pytest.raises(MatchRulesDecodeError, match="should be a 'map', but was 'string'"):
            decode_match_rules('["cdMatchRule"]')

    @pytest.mark.anyio
    async def test_malformed_json_propagates_parser_error(self):
        """Test that truncated JSON raises the JSON parser's own error."""
        with pytest.raises(json.JSONDecodeError):
            decode_match_rules('[{"type": "cdMatchRule"')

    @pytest.mark.anyio
    async def test_top_level_object_is_rejected(self):
        """Test that the payload must be an array."""
        with pytest.raises(MatchRulesDecodeError, match="expected an array of match rules"):
            decode_match_rules('{"type": "cdMatchRule"}')

    @pytest.mark.anyio
    async def test_null_and_empty_payloads_decode_to_empty_list(self):
        """Test that null and [] both mean an empty ruleset."""
        assert decode_match_rules("null") == []
        assert decode_match_rules("[]") == []

    @pytest.mark.anyio
    async def test_first_error_aborts_decode(self):
        """Test that decoding stops at the first bad entry."""
        payload = [
            {"type": "cdMatchRule"},
            {"type": "xxMatchRule"},
            {"name": "never reached"},
        ]

        with pytest.raises(UnsupportedRuleTypeError) as exc_info:
            decode_match_rules(payload)

        assert exc_info.value.index == 1

    @pytest.mark.anyio
    async def test_wrong_field_type_is_reported(self):
        """Test that a field with the wrong JSON type fails the decode."""
        with pytest.raises(MatchRulesDecodeError) as exc_info:
            decode_match_rules('[{"type": "erMatchRule", "statusCode": "moved"}]')

        assert str(exc_info.value).startswith("unmarshalling MatchRules: statusCode")


class TestObjectMatchValue:
    """Tests for the nested objectMatchValue union."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "rule_type,variant",
        [
            ("cdMatchRule", "PR"),
            ("erMatchRule", "ER"),
            ("frMatchRule", "FR"),
            ("apMatchRule", "AP"),
            ("igMatchRule", "RC"),
        ],
    )
    async def test_range_rejected_outside_application_segmentation(self, rule_type, variant):
        """Test that range values fail at decode time for other cloudlets."""
        payload = [
            {
                "type": rule_type,
                "matches": [{"objectMatchValue": {"type": "range", "value": [1, 50]}}],
            }
        ]

        with pytest.raises(MatchRulesDecodeError) as exc_info:
            decode_match_rules(payload)

        assert str(exc_info.value) == (
            f"unmarshalling MatchRules: unmarshalling MatchCriteria{variant}: "
            "objectMatchValue has unexpected type: 'range'"
        )
        assert exc_info.value.index == 0

    @pytest.mark.anyio
    async def test_range_accepted_by_application_segmentation(self):
        """Test that AS criteria decode range values."""
        rules = decode_match_rules(
            [{"type": "asMatchRule", "matches": [{"objectMatchValue": {"type": "range", "value": [1, 50]}}]}]
        )

        assert rules[0].matches[0].object_match_value == ObjectMatchValueRange(value=[1, 50])

    @pytest.mark.anyio
    async def test_simple_and_object_values(self):
        """Test that simple and object kinds decode into their models."""
        rules = decode_match_rules(
            [
                {
                    "type": "erMatchRule",
                    "matches": [
                        {"objectMatchValue": {"type": "simple", "value": ["GET"]}},
                        {
                            "objectMatchValue": {
                                "type": "object",
                                "name": "ER",
                                "options": {
                                    "value": ["text/html*", "text/css*"],
                                    "valueHasWildcard": True,
                                },
                            }
                        },
                    ],
                }
            ]
        )

        matches = rules[0].matches
        assert all(isinstance(criteria, MatchCriteriaER) for criteria in matches)
        assert matches[0].object_match_value == ObjectMatchValueSimple(value=["GET"])
        assert matches[1].object_match_value == ObjectMatchValueObject(
            name="ER",
            options=ObjectMatchValueObjectOptions(
                value=["text/html*", "text/css*"], value_has_wildcard=True
            ),
        )

    @pytest.mark.anyio
    async def test_unknown_kind_is_rejected(self):
        """Test that a kind outside the union fails like a disallowed one."""
        with pytest.raises(MatchRulesDecodeError, match="objectMatchValue has unexpected type: 'list'"):
            decode_match_rules([{"type": "erMatchRule", "matches": [{"objectMatchValue": {"type": "list"}}]}])

    @pytest.mark.anyio
    async def test_object_match_value_must_be_an_object(self):
        """Test that the resolver error is wrapped with the criteria name."""
        with pytest.raises(MatchRulesDecodeError) as exc_info:
            decode_match_rules([{"type": "frMatchRule", "matches": [{"objectMatchValue": "GET"}]}])

        assert str(exc_info.value) == (
            "unmarshalling MatchRules: unmarshalling MatchCriteriaFR: "
            "structure of objectMatchValue should be 'map', but was 'string'"
        )

    @pytest.mark.anyio
    async def test_null_object_match_value_is_absent(self):
        """Test that a null objectMatchValue decodes as no value."""
        rules = decode_match_rules(
            [{"type": "cdMatchRule", "matches": [{"matchValue": "a", "objectMatchValue": None}]}]
        )

        assert rules[0].matches[0].object_match_value is None


class TestResolveObjectMatchValueType:
    """Tests for the shared objectMatchValue discriminator resolver."""

    @pytest.mark.anyio
    async def test_returns_type(self):
        assert resolve_object_match_value_type({"type": "simple", "value": []}) == "simple"

    @pytest.mark.anyio
    async def test_returns_unknown_type_unchanged(self):
        """Test that the resolver does not judge the kind itself."""
        assert resolve_object_match_value_type({"type": "whatever"}) == "whatever"

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "value,message",
        [
            ("simple", "structure of objectMatchValue should be 'map', but was 'string'"),
            (["simple"], "structure of objectMatchValue should be 'map', but was 'array'"),
            (12, "structure of objectMatchValue should be 'map', but was 'number'"),
            ({"value": ["a"]}, "objectMatchValue should contain 'type' field"),
            ({"type": 1}, "'type' should be a string"),
            ({"type": None}, "'type' should be a string"),
        ],
    )
    async def test_rejects_malformed_values(self, value, message):
        with pytest.raises(ObjectMatchValueTypeError) as exc_info:
            resolve_object_match_value_type(value)

        assert str(exc_info.value) == message


class TestFieldDefaults:
    """Tests for null and absent field handling."""

    @pytest.mark.anyio
    async def test_null_match_url_decodes_to_empty_string(self):
        rule = decode_match_rule({"type": "cdMatchRule", "matchURL": None})

        assert rule.match_url == ""

    @pytest.mark.anyio
    async def test_absent_fields_take_zero_values(self):
        """Test that absent booleans, lists and numbers default to zero values."""
        rule = decode_match_rule({"type": "erMatchRule"})

        assert rule.matches == []
        assert rule.disabled is False
        assert rule.matches_always is False
        assert rule.use_incoming_query_string is False
        assert rule.status_code == 0
        assert rule.redirect_url == ""

    @pytest.mark.anyio
    async def test_null_pass_through_percent_stays_unset(self):
        rule = decode_match_rule({"type": "apMatchRule", "passThroughPercent": None})

        assert rule.pass_through_percent is None

    @pytest.mark.anyio
    async def test_unknown_server_fields_are_dropped(self):
        """Test that fields the models do not know about are ignored."""
        rule = decode_match_rule({"type": "igMatchRule", "allowDeny": "allow", "akaRuleId": "abc123"})

        assert rule == MatchRuleRC(allow_deny="allow")
        assert not hasattr(rule, "aka_rule_id")


class TestWireTypes:
    """Tests that wire values of the wrong JSON type are not converted."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "entry,location",
        [
            ({"type": "erMatchRule", "statusCode": "301"}, "statusCode"),
            ({"type": "erMatchRule", "start": "5"}, "start"),
            ({"type": "erMatchRule", "disabled": "true"}, "disabled"),
            ({"type": "erMatchRule", "redirectURL": 42}, "redirectURL"),
            ({"type": "cdMatchRule", "forwardSettings": {"percent": 10.5}}, "forwardSettings.percent"),
            ({"type": "apMatchRule", "passThroughPercent": "50"}, "passThroughPercent"),
            ({"type": "igMatchRule", "matches": [{"negate": 1}]}, "matches.0.negate"),
            (
                {"type": "asMatchRule", "matches": [{"objectMatchValue": {"type": "range", "value": ["1", "5"]}}]},
                "matches.0.objectMatchValue",
            ),
        ],
    )
    async def test_wrong_type_fails_decode(self, entry, location):
        with pytest.raises(MatchRulesDecodeError) as exc_info:
            decode_match_rules([{"type": "igMatchRule", "allowDeny": "allow"}, entry])

        assert exc_info.value.index == 1
        assert str(exc_info.value).startswith(f"unmarshalling MatchRules: {location}")

    @pytest.mark.anyio
    async def test_string_status_code_in_json_text(self):
        with pytest.raises(MatchRulesDecodeError) as exc_info:
            decode_match_rules('[{"type":"erMatchRule","statusCode":"301"}]')

        assert exc_info.value.index == 0

    @pytest.mark.anyio
    async def test_integer_percent_accepted_as_float(self):
        rule = decode_match_rule({"type": "apMatchRule", "passThroughPercent": 50})

        assert rule.pass_through_percent == 50


class TestOrder:
    """Tests for rule order preservation."""

    @pytest.mark.anyio
    async def test_rule_order_is_preserved(self, mixed_rules_json):
        rules = decode_match_rules(json.dumps(mixed_rules_json))

        assert [type(rule) for rule in rules] == [
            MatchRulePR,
            MatchRuleER,
            MatchRuleFR,
            MatchRuleAP,
            MatchRuleAS,
            MatchRuleRC,
        ]
        assert [rule.name for rule in rules] == [entry["name"] for entry in mixed_rules_json]
