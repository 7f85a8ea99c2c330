"""
Unified configuration system for Code Sorter
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from code_sorter.core.ordering import STRATEGIES

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = [".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts"]

PROJECT_CONFIG_NAME = ".code-sorter.yaml"


@dataclass
class OrderingConfig:
    """Configuration for code ordering operations"""

    strategy: str = "grouped"  # grouped or kind
    sort_class_members: bool = True
    extensions: list[str] = field(default_factory=lambda: list(SUPPORTED_EXTENSIONS))
    exclude_dirs: list[str] = field(
        default_factory=lambda: ["node_modules", ".git", "dist", "build"]
    )


@dataclass
class BackupConfig:
    """Configuration for backup operations"""

    enabled: bool = True
    directory: str = ".backups"
    compression: bool = True
    keep_sessions: int = 10


@dataclass
class Config:
    """Main configuration class for Code Sorter"""

    # General settings
    dry_run: bool = False
    check: bool = False
    verbose: bool = False
    quiet: bool = False

    # Sub-configurations
    ordering: OrderingConfig = field(default_factory=OrderingConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)

    # File paths
    config_file: str | None = None

    @classmethod
    def from_file(cls, filepath: Path) -> "Config":
        """Load configuration from YAML or JSON file"""
        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return cls()

        try:
            with open(filepath, "r") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif filepath.suffix == ".json":
                    data = json.load(f)
                else:
                    logger.error(f"Unsupported config file format: {filepath.suffix}")
                    return cls()

            config = cls._from_dict(data or {})
            config.config_file = str(filepath)
            return config
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file: {e}")
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config instance from dictionary"""
        config = cls()

        # Load general settings
        for key in ["dry_run", "check", "verbose", "quiet"]:
            if key in data:
                setattr(config, key, data[key])

        # Load sub-configurations
        if "ordering" in data:
            config.ordering = OrderingConfig(**data["ordering"])
        if "backup" in data:
            config.backup = BackupConfig(**data["backup"])

        return config

    @classmethod
    def load_hierarchy(cls, project_dir: Path | None = None) -> "Config":
        """Load configuration from hierarchy: global -> project -> env vars"""
        config = cls()

        # 1. Load global config
        global_config = Path.home() / ".code-sorter" / "config.yaml"
        if global_config.exists():
            config = cls.from_file(global_config)
            logger.debug(f"Loaded global config from {global_config}")

        # 2. Load project config
        if project_dir:
            project_config = project_dir / PROJECT_CONFIG_NAME
            if project_config.exists():
                project_data = cls.from_file(project_config)
                config.merge(project_data)
                logger.debug(f"Loaded project config from {project_config}")

        # 3. Apply environment variables
        config.apply_env_vars()

        return config

    def merge(self, other: "Config") -> None:
        """Merge another config into this one (other takes precedence)"""
        if other.config_file:
            self.config_file = other.config_file

        # Merge boolean flags (only if explicitly set to True)
        for flag in ["dry_run", "check", "verbose", "quiet"]:
            if getattr(other, flag):
                setattr(self, flag, True)

        # Merge sub-configurations
        self._merge_dataclass(self.ordering, other.ordering)
        self._merge_dataclass(self.backup, other.backup)

    def _merge_dataclass(self, target: Any, source: Any) -> None:
        """Merge source dataclass into target"""
        for field_name in source.__dataclass_fields__:
            source_value = getattr(source, field_name)
            if source_value != getattr(target.__class__(), field_name):
                setattr(target, field_name, source_value)

    def apply_env_vars(self) -> None:
        """Apply environment variables to configuration"""
        # CODE_SORTER_DRY_RUN
        if os.environ.get("CODE_SORTER_DRY_RUN", "").lower() in ["true", "1", "yes"]:
            self.dry_run = True

        # CODE_SORTER_VERBOSE
        if os.environ.get("CODE_SORTER_VERBOSE", "").lower() in ["true", "1", "yes"]:
            self.verbose = True

        # CODE_SORTER_STRATEGY
        if strategy := os.environ.get("CODE_SORTER_STRATEGY"):
            self.ordering.strategy = strategy

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        # Validate ordering strategy
        if self.ordering.strategy not in STRATEGIES:
            errors.append(f"Invalid ordering strategy: {self.ordering.strategy}")

        # Validate extensions
        for extension in self.ordering.extensions:
            if not extension.startswith("."):
                errors.append(f"Invalid file extension: {extension}")

        if self.backup.keep_sessions < 1:
            errors.append("Backup keep_sessions must be at least 1")

        if self.dry_run and self.check:
            errors.append("dry_run and check cannot be combined")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "dry_run": self.dry_run,
            "check": self.check,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "ordering": asdict(self.ordering),
            "backup": asdict(self.backup),
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to file"""
        data = self.to_dict()

        with open(filepath, "w") as f:
            if filepath.suffix in [".yaml", ".yml"]:
                yaml.safe_dump(data, f, default_flow_style=False)
            elif filepath.suffix == ".json":
                json.dump(data, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {filepath.suffix}")
