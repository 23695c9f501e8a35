"""Tests for table rules."""

import dataclasses

import pytest

from core.rules import SetRules


class TestSetRules:
    def test_defaults(self):
        rules = SetRules()
        assert rules.table_size == 12
        assert rules.deal_size == 3
        assert rules.deal_gate_table_size == 15
        assert rules.resolve_delay == 1.0
        assert rules.reselect_policy == "ignore"

    def test_frozen(self):
        rules = SetRules()
        with pytest.raises(dataclasses.FrozenInstanceError):
            rules.table_size = 9  # type: ignore[misc]

    def test_presets(self):
        assert SetRules.classic() == SetRules()
        assert SetRules.instant().resolve_delay == 0.0
        assert SetRules.forgiving().reselect_policy == "restart"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"table_size": 2},
            {"table_size": 82},
            {"deal_size": 0},
            {"table_size": 15, "deal_gate_table_size": 12},
            {"resolve_delay": -0.5},
            {"reselect_policy": "replace"},
        ],
    )
    def test_invalid_rules_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SetRules(**kwargs)

    def test_custom_table(self):
        rules = SetRules(table_size=9, deal_gate_table_size=12)
        assert rules.table_size == 9
        assert rules.deal_gate_table_size == 12
