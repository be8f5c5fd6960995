"""
Unit tests for feature encoding and training-data validation.
"""

import os
from unittest.mock import patch

import pytest

from feature_store.base import TrainingRecord
from footprint.calculator import calculate_footprint
from ml_pipeline.config import MLConfig
from ml_pipeline.features import (
    FEATURE_COLUMNS,
    annualize_inputs,
    build_feature_vector,
    encode_diet_type,
    prepare_training_data,
    training_record_from_assessment,
)


def _record(**overrides) -> TrainingRecord:
    values = dict(
        transport_km=5200.0,
        energy_units=3600.0,
        diet_type="vegan",
        waste_kg=520.0,
        total_emission=4000.0,
        emission_category="Moderate",
    )
    values.update(overrides)
    return TrainingRecord(**values)


class TestMLConfig:
    def test_config_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = MLConfig.from_env()
            assert config.learning_rate == 0.0001
            assert config.iterations == 1000
            assert config.min_training_points == 10
            assert config.synthetic_batch_size == 100
            assert config.tracking_enabled is False
            assert config.feature_count == 4

    def test_config_reads_overrides(self):
        env = {"LEARNING_RATE": "0.000001", "RANDOM_SEED": "7", "MLFLOW_TRACKING_ENABLED": "true"}
        with patch.dict(os.environ, env, clear=True):
            config = MLConfig.from_env()
            assert config.learning_rate == 0.000001
            assert config.random_seed == 7
            assert config.tracking_enabled is True

    def test_feature_schema_follows_encoder(self):
        """Model width and weight names always match what the encoder emits."""
        env = {"FEATURE_COLUMNS": "a,b", "TARGET_COLUMN": "other"}
        with patch.dict(os.environ, env, clear=True):
            config = MLConfig.from_env()
            assert config.feature_columns == list(FEATURE_COLUMNS)
            assert len(build_feature_vector(1, 1, "vegan", 1)) == config.feature_count
            assert not hasattr(config, "target_column")


class TestEncoding:
    @pytest.mark.parametrize(
        "diet,expected",
        [("vegan", 1), ("vegetarian", 2), ("pescatarian", 3), ("non_vegetarian", 4), ("keto", 2)],
    )
    def test_diet_ordinals(self, diet, expected):
        assert encode_diet_type(diet) == expected

    def test_feature_vector_order(self):
        assert build_feature_vector(100, 200, "pescatarian", 30) == (100.0, 200.0, 3.0, 30.0)

    def test_annualize_inputs(self, high_impact_inputs):
        assert annualize_inputs(high_impact_inputs) == {
            "transport_km": 5200,
            "energy_units": 3600,
            "waste_kg": 520,
        }

    def test_training_record_from_assessment(self, high_impact_inputs):
        breakdown = calculate_footprint(high_impact_inputs)
        record = training_record_from_assessment(high_impact_inputs, breakdown)

        assert record.transport_km == 5200
        assert record.diet_type == "non_vegetarian"
        assert record.total_emission == breakdown.total
        assert record.emission_category == "High"
        assert record.is_synthetic is False


class TestPrepareTrainingData:
    def test_encodes_records(self):
        points = prepare_training_data([_record(), _record(diet_type="non_vegetarian")])

        assert len(points) == 2
        assert points[0].features == (5200.0, 3600.0, 1.0, 520.0)
        assert points[1].features[2] == 4.0
        assert points[0].target == 4000.0

    def test_empty_input(self):
        assert prepare_training_data([]) == []

    def test_fail_fast_on_corrupt_data(self):
        """A non-numeric feature must raise, never silently become zero."""
        with pytest.raises(ValueError) as excinfo:
            prepare_training_data([_record(), _record(transport_km="error")])

        assert "contains non-numeric data" in str(excinfo.value)

    def test_numeric_strings_are_accepted(self):
        points = prepare_training_data([_record(energy_units="3600")])
        assert points[0].features[1] == 3600.0

    def test_incomplete_rows_are_dropped(self):
        points = prepare_training_data([_record(), _record(total_emission=None)])
        assert len(points) == 1
