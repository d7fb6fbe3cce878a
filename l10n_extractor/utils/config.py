"""Configuration management for l10n-extractor."""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import asdict, dataclass, field, fields

CONFIG_FILENAME = '.l10n-extractor.yml'

VALID_FRAMEWORKS = ['flutter']
VALID_NAMING = ['camelCase', 'snake_case']
VALID_REPORT_FORMATS = ['console', 'json']


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class ProjectConfig:
    """Project configuration."""
    name: str = "Unnamed Project"
    framework: str = "flutter"


@dataclass
class PathsConfig:
    """Paths configuration."""
    source: str = "lib"
    exclude: List[str] = field(default_factory=lambda: [
        'build/', '.dart_tool/', 'l10n/', '*.g.dart', '*.freezed.dart'
    ])


@dataclass
class ExtractionConfig:
    """Literal filtering and context collection."""
    min_length: int = 2
    max_length: int = 200
    context_window: int = 50
    # Call text that marks a literal as already localized
    accessor_markers: List[str] = field(
        default_factory=lambda: ['AppLocalizations', 'l10n.', '.of(context)'])


@dataclass
class AccessorConfig:
    """How replaced literals are written back."""
    import_line: str = "import 'package:flutter_gen/gen_l10n/app_localizations.dart';"
    template: str = "AppLocalizations.of(context)!.{key}"
    remove_const: bool = True


@dataclass
class KeysConfig:
    """Key derivation."""
    naming: str = "camelCase"  # camelCase | snake_case
    max_length: int = 35


@dataclass
class ProcessingConfig:
    """Run options."""
    threads: bool = True
    backup: bool = True
    min_confidence: float = 0.0


@dataclass
class ReportsConfig:
    """Reports configuration."""
    formats: List[str] = field(default_factory=lambda: ["console"])
    output: str = "./l10n_reports/"


def _section(section_cls, data: Optional[Dict[str, Any]], errors: List[str], name: str):
    """Build a section dataclass, collecting unknown keys as errors."""
    data = data or {}
    if not isinstance(data, dict):
        errors.append(f"Section '{name}' must be a mapping")
        return section_cls()
    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        errors.append(f"Unknown key(s) in '{name}': {', '.join(unknown)}")
    return section_cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Config:
    """Main configuration class."""
    project: ProjectConfig = field(default_factory=ProjectConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    accessor: AccessorConfig = field(default_factory=AccessorConfig)
    keys: KeysConfig = field(default_factory=KeysConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from YAML.

        Without an explicit path, ``.l10n-extractor.yml`` in the current
        directory is used when present, otherwise the defaults.

        Raises:
            ConfigValidationError: If the file has unknown sections or keys
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

            if not config_path.exists():
                return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        errors: List[str] = []
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            errors.append(f"Unknown section(s): {', '.join(unknown)}")

        config = cls(
            project=_section(ProjectConfig, data.get('project'), errors, 'project'),
            paths=_section(PathsConfig, data.get('paths'), errors, 'paths'),
            extraction=_section(ExtractionConfig, data.get('extraction'), errors, 'extraction'),
            accessor=_section(AccessorConfig, data.get('accessor'), errors, 'accessor'),
            keys=_section(KeysConfig, data.get('keys'), errors, 'keys'),
            processing=_section(ProcessingConfig, data.get('processing'), errors, 'processing'),
            reports=_section(ReportsConfig, data.get('reports'), errors, 'reports'),
        )
        if errors:
            raise ConfigValidationError(errors)
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors = []
        warnings = []

        if self.project.framework not in VALID_FRAMEWORKS:
            errors.append(
                f"Invalid framework '{self.project.framework}'. "
                f"Valid options: {', '.join(VALID_FRAMEWORKS)}"
            )

        if not Path(self.paths.source).exists():
            warnings.append(ConfigValidationWarning(
                f"Source path does not exist: {self.paths.source}"
            ))

        extraction = self.extraction
        if extraction.min_length < 0:
            errors.append(f"extraction.min_length must be >= 0, got {extraction.min_length}")
        if extraction.max_length < extraction.min_length:
            errors.append(
                f"extraction.max_length ({extraction.max_length}) is smaller than "
                f"extraction.min_length ({extraction.min_length})"
            )
        if extraction.context_window < 0:
            errors.append(f"extraction.context_window must be >= 0, got {extraction.context_window}")
        if not extraction.accessor_markers:
            warnings.append(ConfigValidationWarning(
                "extraction.accessor_markers is empty; localized calls will not be recognized"
            ))

        if '{key}' not in self.accessor.template:
            errors.append("accessor.template must contain '{key}'")
        if not self.accessor.import_line:
            warnings.append(ConfigValidationWarning(
                "accessor.import_line is empty; rewritten files will not get an import"
            ))

        if self.keys.naming not in VALID_NAMING:
            errors.append(
                f"Invalid keys.naming '{self.keys.naming}'. "
                f"Valid options: {', '.join(VALID_NAMING)}"
            )
        if self.keys.max_length < 8:
            errors.append(f"keys.max_length must be at least 8, got {self.keys.max_length}")

        if not 0.0 <= self.processing.min_confidence <= 1.0:
            errors.append(
                f"processing.min_confidence must be between 0 and 1, got {self.processing.min_confidence}"
            )

        for fmt in self.reports.formats:
            if fmt not in VALID_REPORT_FORMATS:
                warnings.append(ConfigValidationWarning(
                    f"Unknown report format: '{fmt}'. Valid options: {', '.join(VALID_REPORT_FORMATS)}"
                ))

        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings


def create_default_config(framework: str = 'flutter') -> Config:
    """Create default configuration for a framework."""
    config = Config()
    config.project.framework = framework
    return config
