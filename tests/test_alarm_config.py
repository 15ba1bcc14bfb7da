"""Tests for the alarm data model: validation, enums, composite rules."""

from __future__ import annotations

import dataclasses

import pytest

from alarm_engine.alarm_config import (
    AlarmDefinition,
    AlarmRecord,
    ComparisonOperator,
    Metric,
    TreatMissingData,
    describe,
    noop_action,
    notify_sns,
)
from alarm_engine.exceptions import InvalidDefinition


# ── Enums ───────────────────────────────────────────────────────


class TestComparisonOperator:
    def test_parse_member_name(self) -> None:
        assert ComparisonOperator.parse("LESS_THAN") is ComparisonOperator.LESS_THAN

    def test_parse_cloudwatch_value(self) -> None:
        parsed = ComparisonOperator.parse("GreaterThanOrEqualToThreshold")
        assert parsed is ComparisonOperator.GREATER_THAN_OR_EQUAL

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            ComparisonOperator.parse("Sideways")

    def test_treat_missing_data_values(self) -> None:
        assert TreatMissingData.parse("notBreaching") is TreatMissingData.NOT_BREACHING
        assert TreatMissingData.parse("IGNORE") is TreatMissingData.IGNORE


# ── AlarmDefinition ─────────────────────────────────────────────


class TestAlarmDefinition:
    def test_valid_definition_passes(self, make_definition) -> None:
        make_definition().validate()

    def test_datapoints_exceeding_periods_rejected(self, make_definition) -> None:
        definition = make_definition(evaluation_periods=3, datapoints_to_alarm=4)
        with pytest.raises(InvalidDefinition, match="exceeds"):
            definition.validate()

    def test_values_not_clamped(self, make_definition) -> None:
        definition = make_definition(evaluation_periods=3, datapoints_to_alarm=4)
        with pytest.raises(InvalidDefinition):
            definition.validate()
        assert definition.datapoints_to_alarm == 4

    def test_non_positive_periods_rejected(self, make_definition) -> None:
        with pytest.raises(InvalidDefinition, match="positive"):
            make_definition(evaluation_periods=0, datapoints_to_alarm=0).validate()

    def test_missing_metric_rejected(self, make_definition) -> None:
        with pytest.raises(InvalidDefinition, match="metric"):
            make_definition(metric=None).validate()

    def test_missing_threshold_allowed_for_composite(self) -> None:
        AlarmDefinition(evaluation_periods=1, datapoints_to_alarm=1).validate(
            composite=True
        )

    def test_string_operator_normalized(self, make_definition) -> None:
        definition = make_definition(comparison_operator="LessThanThreshold")
        assert definition.comparison_operator is ComparisonOperator.LESS_THAN

    def test_bad_operator_rejected(self, make_definition) -> None:
        with pytest.raises(InvalidDefinition):
            make_definition(comparison_operator="Sideways")

    def test_tags_become_frozenset(self, make_definition) -> None:
        definition = make_definition(custom_tags=["a", "b", "a"])
        assert definition.custom_tags == frozenset({"a", "b"})

    def test_single_string_tag_rejected(self, make_definition) -> None:
        with pytest.raises(InvalidDefinition):
            make_definition(custom_tags="grp")

    @pytest.mark.parametrize("threshold", ["abc", "100", True, None])
    def test_non_numeric_threshold_rejected(self, make_definition, threshold) -> None:
        with pytest.raises(InvalidDefinition):
            make_definition(threshold=threshold).validate()

    @pytest.mark.parametrize("threshold", [0, 100, 0.5])
    def test_numeric_threshold_accepted(self, make_definition, threshold) -> None:
        make_definition(threshold=threshold).validate()

    def test_definition_is_immutable(self, make_definition) -> None:
        definition = make_definition()
        with pytest.raises(dataclasses.FrozenInstanceError):
            definition.threshold = 5  # type: ignore[misc]

    def test_definition_is_hashable(self, make_definition) -> None:
        assert hash(make_definition()) == hash(make_definition())

    def test_metric_dimensions_are_immutable(self, metric) -> None:
        assert metric.dimensions == (("FunctionName", "order-handler"),)
        with pytest.raises(AttributeError):
            metric.dimensions.append(("Alias", "live"))  # type: ignore[attr-defined]
        with pytest.raises(dataclasses.FrozenInstanceError):
            metric.dimensions = ()  # type: ignore[misc]

    def test_metric_dimension_forms(self) -> None:
        expected = (("TableName", "Orders"),)
        assert Metric("R", "AWS/DynamoDB", dimensions={"TableName": "Orders"}).dimensions == expected
        assert Metric("R", "AWS/DynamoDB", dimensions=[("TableName", "Orders")]).dimensions == expected
        assert Metric("R", "AWS/DynamoDB").dimensions == ()


# ── AlarmRecord ─────────────────────────────────────────────────


class TestAlarmRecord:
    def test_alarm_rule_ors_members(self, make_definition) -> None:
        a = AlarmRecord(name="a", description="", definition=make_definition())
        b = AlarmRecord(name="b", description="", definition=make_definition())
        composite = AlarmRecord(
            name="c",
            description="",
            definition=AlarmDefinition(evaluation_periods=1, datapoints_to_alarm=1),
            is_composite=True,
            members=(a, b),
        )
        assert composite.alarm_rule == 'ALARM("a") OR ALARM("b")'

    def test_alarm_actions(self, make_definition) -> None:
        record = AlarmRecord(
            name="a",
            description="",
            definition=make_definition(),
            action=notify_sns("arn:1", "arn:2"),
        )
        assert record.alarm_actions() == ["arn:1", "arn:2"]

    def test_noop_action_has_no_topics(self, make_definition) -> None:
        record = AlarmRecord(
            name="a", description="", definition=make_definition(), action=noop_action()
        )
        assert record.alarm_actions() == []

    def test_describe_metric_alarm(self, make_definition) -> None:
        record = AlarmRecord(
            name="a", description="", definition=make_definition(custom_tags=["x"])
        )
        summary = describe(record)
        assert summary["metric"] == "AWS/Lambda/Duration"
        assert summary["comparison"] == "GreaterThanThreshold"
        assert summary["datapoints"] == "5/5"
        assert summary["tags"] == ["x"]
