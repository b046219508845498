"""Tests for the configuration layer."""

import warnings

import pytest

from hadron_cascade.config import (
    AbsorptionConfig,
    CascadeConfig,
    ConfigurationError,
    ConfigurationWarning,
    RetryExhaustedPolicy,
    create_default_config,
    create_validated_config,
    get_default,
    get_defaults,
    read_config_file,
    reload_defaults,
    validate_config,
    warn_if_unsafe,
)


class TestYamlDefaults:
    """Tests for defaults.yaml access."""

    def test_dotted_lookup(self):
        """Dotted keys reach nested values."""
        assert get_default('nuclear.fermi_momentum') == pytest.approx(250.0)
        assert get_default('absorption.phase_space_max_particles') == 18
        assert get_default('absorption.n_split_groups') == 5

    def test_missing_key_returns_default(self):
        """Unknown keys fall back to the given default."""
        assert get_default('nuclear.no_such_key', 'fallback') == 'fallback'

    def test_sections_present(self):
        """All configuration sections are present."""
        defaults = get_defaults()
        for section in ('nuclear', 'fates', 'absorption', 'kinematics'):
            assert section in defaults

    def test_defaults_are_copied(self):
        """Editing the returned sections leaves the cached defaults alone."""
        get_defaults()["nuclear"]["fermi_momentum"] = 0.0
        assert get_default("nuclear.fermi_momentum") == pytest.approx(250.0)

    def test_reload_from_environment(self, tmp_path, monkeypatch):
        """HADRON_CASCADE_DEFAULTS_PATH points the loader at another file."""
        path = tmp_path / "defaults.yaml"
        path.write_text("absorption:\n  n_split_groups: 3\n")
        monkeypatch.setenv("HADRON_CASCADE_DEFAULTS_PATH", str(path))
        try:
            reload_defaults()
            assert get_default("absorption.n_split_groups") == 3
        finally:
            monkeypatch.delenv("HADRON_CASCADE_DEFAULTS_PATH")
            reload_defaults()
        assert get_default("absorption.n_split_groups") == 5


class TestCascadeConfig:
    """Tests for CascadeConfig dataclasses."""

    def test_defaults_match_yaml(self):
        """Dataclass defaults come from defaults.yaml."""
        config = create_default_config()
        assert config.nuclear.do_fermi is True
        assert config.nuclear.nucleon_removal_energy == pytest.approx(7.4)
        assert config.absorption.two_body_binding_energy == pytest.approx(75.0)
        assert config.absorption.max_absorbed_nucleons == 85
        assert config.kinematics.max_kinematics_attempts == 100
        assert config.kinematics.retry_exhausted_policy == RetryExhaustedPolicy.STABLE_FINAL_STATE

    def test_default_config_is_valid(self):
        """Default configuration passes validation."""
        assert create_default_config().validate() == []

    def test_invalid_values_reported(self):
        """Invalid values produce one error each."""
        config = CascadeConfig()
        config.nuclear.fermi_factor = -1.0
        config.kinematics.max_kinematics_attempts = 0
        errors = config.validate()
        assert len(errors) == 2
        assert any('fermi_factor' in e for e in errors)
        assert any('max_kinematics_attempts' in e for e in errors)

    def test_split_capacity_checked(self):
        """The nucleon cap must fit in the split groups."""
        absorption = AbsorptionConfig(
            max_absorbed_nucleons=100, phase_space_max_particles=18, n_split_groups=5,
        )
        errors = absorption.validate()
        assert any('capacity' in e for e in errors)

    def test_dict_round_trip(self):
        """to_dict/from_dict preserve every field, including the policy enum."""
        config = create_default_config()
        config.nuclear.fermi_factor = 0.8
        config.kinematics.retry_exhausted_policy = RetryExhaustedPolicy.RAISE

        data = config.to_dict()
        assert data['kinematics']['retry_exhausted_policy'] == 'raise'

        restored = CascadeConfig.from_dict(data)
        assert restored == config

    def test_from_partial_dict(self):
        """Missing sections fall back to defaults."""
        config = CascadeConfig.from_dict({'nuclear': {'do_fermi': False}})
        assert config.nuclear.do_fermi is False
        assert config.absorption == AbsorptionConfig()


class TestValidation:
    """Tests for validation helpers."""

    def test_validate_config_raises(self):
        """Invalid configurations raise ConfigurationError."""
        config = CascadeConfig()
        config.fates.max_fate_iterations = 0
        with pytest.raises(ConfigurationError, match='max_fate_iterations'):
            validate_config(config)

    def test_validate_config_no_raise(self):
        """raise_on_error=False returns the error list."""
        config = CascadeConfig()
        config.absorption.n_split_groups = 1
        is_valid, errors = validate_config(config, raise_on_error=False)
        assert not is_valid
        assert errors

    def test_create_validated_config_overrides(self):
        """Keyword overrides land in the right section."""
        config = create_validated_config(
            do_fermi=False, max_kinematics_attempts=20, retry_exhausted_policy='raise',
        )
        assert config.nuclear.do_fermi is False
        assert config.kinematics.max_kinematics_attempts == 20
        assert config.kinematics.retry_exhausted_policy == RetryExhaustedPolicy.RAISE

    def test_create_validated_config_unknown_key(self):
        """Unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match='Unknown'):
            create_validated_config(not_a_parameter=1)

    def test_warn_if_unsafe(self):
        """Questionable but legal settings warn."""
        config = create_default_config()
        config.nuclear.do_fermi = False
        config.kinematics.validate_conservation = False
        with pytest.warns(ConfigurationWarning):
            messages = warn_if_unsafe(config)
        assert len(messages) == 2

    def test_default_config_does_not_warn(self):
        """The default configuration issues no warnings."""
        with warnings.catch_warnings():
            warnings.simplefilter('error', ConfigurationWarning)
            assert warn_if_unsafe(create_default_config()) == []


class TestConfigFiles:
    """Tests for reading user configuration files."""

    def test_missing_sections_are_empty(self, tmp_path):
        path = tmp_path / "cascade.yml"
        path.write_text("fates:\n  max_fate_iterations: 7\n")
        sections = read_config_file(path)
        assert sections["fates"] == {"max_fate_iterations": 7}
        assert sections["nuclear"] == {}
        assert set(sections) == {"nuclear", "fates", "absorption", "kinematics"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cascade.yaml"
        path.write_text("")
        assert read_config_file(path)["absorption"] == {}

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "cascade.json"
        path.write_text('{"energy_grid": {"e_min": 1.0}}')
        with pytest.raises(ValueError, match="energy_grid"):
            read_config_file(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "cascade.yaml"
        path.write_text("nuclear: 250\n")
        with pytest.raises(ValueError, match="nuclear"):
            read_config_file(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "cascade.yaml"
        path.write_text("- nuclear\n- fates\n")
        with pytest.raises(ValueError):
            read_config_file(path)
