"""Tests for configuration validation."""

import pytest
from pathlib import Path
import tempfile
import yaml

from l10n_extractor.utils.config import (
    Config,
    ConfigValidationError,
    ConfigValidationWarning,
    create_default_config,
)


class TestConfigValidation:
    """Test cases for Config.validate() method."""

    def test_valid_default_config(self):
        """Default config should pass validation."""
        config = Config()
        errors, warnings = config.validate()
        assert len(errors) == 0

    def test_invalid_framework(self):
        """Invalid framework should cause error."""
        config = Config()
        config.project.framework = "swift"
        errors, warnings = config.validate()
        assert len(errors) == 1
        assert "Invalid framework" in errors[0]

    def test_negative_min_length(self):
        """min_length cannot be negative."""
        config = Config()
        config.extraction.min_length = -1
        errors, warnings = config.validate()
        assert any("extraction.min_length must be >= 0" in e for e in errors)

    def test_max_below_min_length(self):
        """max_length must not be smaller than min_length."""
        config = Config()
        config.extraction.min_length = 10
        config.extraction.max_length = 5
        errors, warnings = config.validate()
        assert any("is smaller than" in e for e in errors)

    def test_negative_context_window(self):
        """The debug context window cannot be negative."""
        config = Config()
        config.extraction.context_window = -5
        errors, warnings = config.validate()
        assert any("context_window must be >= 0" in e for e in errors)

    def test_empty_accessor_markers_warning(self):
        """No markers means localized calls are not recognized."""
        config = Config()
        config.extraction.accessor_markers = []
        errors, warnings = config.validate()
        assert len(errors) == 0
        assert any("accessor_markers" in str(w) for w in warnings)

    def test_template_needs_key(self):
        """The accessor template must have a key placeholder."""
        config = Config()
        config.accessor.template = "AppLocalizations.of(context)!.title"
        errors, warnings = config.validate()
        assert errors == ["accessor.template must contain '{key}'"]

    def test_empty_import_line_warning(self):
        """An empty import line is allowed but reported."""
        config = Config()
        config.accessor.import_line = ""
        errors, warnings = config.validate()
        assert len(errors) == 0
        assert any("import_line" in str(w) for w in warnings)

    def test_naming_styles(self):
        """Only camelCase and snake_case are accepted."""
        for naming in ['camelCase', 'snake_case']:
            config = Config()
            config.keys.naming = naming
            errors, warnings = config.validate()
            assert len(errors) == 0, f"Naming '{naming}' should be valid"

        config = Config()
        config.keys.naming = "PascalCase"
        errors, warnings = config.validate()
        assert any("Invalid keys.naming" in e for e in errors)

    def test_key_max_length(self):
        """Keys need room for at least a short word."""
        config = Config()
        config.keys.max_length = 4
        errors, warnings = config.validate()
        assert any("keys.max_length must be at least 8" in e for e in errors)

    def test_min_confidence_range(self):
        """min_confidence should be between 0 and 1."""
        for value in [-0.1, 1.5]:
            config = Config()
            config.processing.min_confidence = value
            errors, warnings = config.validate()
            assert any("min_confidence must be between 0 and 1" in e for e in errors)

        for value in [0.0, 0.5, 1.0]:
            config = Config()
            config.processing.min_confidence = value
            errors, warnings = config.validate()
            assert len(errors) == 0

    def test_invalid_report_format_warning(self):
        """Invalid report format should produce warning."""
        config = Config()
        config.reports.formats = ['json', 'html']
        errors, warnings = config.validate()
        assert any("Unknown report format" in str(w) for w in warnings)

    def test_valid_report_formats(self):
        """Valid report formats should pass."""
        config = Config()
        config.reports.formats = ['json', 'console']
        errors, warnings = config.validate()
        format_warnings = [w for w in warnings if "report format" in str(w)]
        assert len(format_warnings) == 0

    def test_raise_on_error(self):
        """validate(raise_on_error=True) should raise exception."""
        config = Config()
        config.project.framework = "invalid"

        with pytest.raises(ConfigValidationError) as excinfo:
            config.validate(raise_on_error=True)

        assert len(excinfo.value.errors) > 0

    def test_source_path_warning(self):
        """Non-existent source path should produce warning."""
        config = Config()
        config.paths.source = "/non/existent/path/12345"
        errors, warnings = config.validate()
        assert any("Source path does not exist" in str(w) for w in warnings)


class TestConfigValidationWarning:
    """Test cases for ConfigValidationWarning class."""

    def test_warning_message(self):
        """Warning should store and display message."""
        warning = ConfigValidationWarning("Test warning message")
        assert warning.message == "Test warning message"
        assert str(warning) == "Test warning message"


class TestConfigValidationError:
    """Test cases for ConfigValidationError class."""

    def test_error_with_multiple_errors(self):
        """Error should handle multiple errors."""
        errors = ["Error 1", "Error 2", "Error 3"]
        error = ConfigValidationError(errors)
        assert len(error.errors) == 3
        assert "Error 1" in str(error)
        assert "Error 2" in str(error)


class TestConfigFromDict:
    """Unknown sections and keys are rejected."""

    def test_partial_sections(self):
        """Missing keys fall back to defaults."""
        config = Config.from_dict({'keys': {'naming': 'snake_case'}})
        assert config.keys.naming == 'snake_case'
        assert config.keys.max_length == 35
        assert config.accessor.remove_const is True

    def test_unknown_section(self):
        """A section from another tool is an error."""
        with pytest.raises(ConfigValidationError) as excinfo:
            Config.from_dict({'languages': {'primary': 'en'}})
        assert excinfo.value.errors == ["Unknown section(s): languages"]

    def test_unknown_key(self):
        """Typos inside a section are reported."""
        with pytest.raises(ConfigValidationError) as excinfo:
            Config.from_dict({'keys': {'nameing': 'snake_case'}})
        assert "Unknown key(s) in 'keys': nameing" in excinfo.value.errors

    def test_section_must_be_mapping(self):
        """A scalar section is rejected."""
        with pytest.raises(ConfigValidationError):
            Config.from_dict({'paths': 'lib'})


class TestConfigFromFile:
    """Test cases for loading and validating config from file."""

    def test_load_valid_config(self):
        """Valid config file should load without errors."""
        config_data = {
            'project': {
                'name': 'Test Project',
                'framework': 'flutter'
            },
            'accessor': {
                'template': 'S.of(context).{key}'
            }
        }

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
            yaml.dump(config_data, f)
            temp_path = Path(f.name)

        try:
            config = Config.from_file(temp_path)
            errors, warnings = config.validate()
            assert len(errors) == 0
            assert config.project.name == 'Test Project'
            assert config.accessor.template == 'S.of(context).{key}'
        finally:
            temp_path.unlink()

    def test_load_invalid_config(self):
        """Invalid config file should produce validation errors."""
        config_data = {
            'project': {
                'framework': 'invalid_framework'
            },
            'keys': {
                'naming': 'kebab-case'
            },
            'processing': {
                'min_confidence': 3
            }
        }

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
            yaml.dump(config_data, f)
            temp_path = Path(f.name)

        try:
            config = Config.from_file(temp_path)
            errors, warnings = config.validate()
            assert len(errors) == 3
        finally:
            temp_path.unlink()

    def test_empty_file(self):
        """An empty file gives the defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / '.l10n-extractor.yml'
            path.write_text('')
            assert Config.from_file(path) == Config()

    def test_save_and_reload(self):
        """Saved configs load back unchanged."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / '.l10n-extractor.yml'
            config = create_default_config('flutter')
            config.keys.naming = 'snake_case'
            config.save(path)
            assert Config.from_file(path) == config


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
