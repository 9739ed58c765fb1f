from typing import Any, Dict, List, Optional
import dataclasses
from dataclasses import dataclass, field
import datetime
import logging

from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

################################################################################
# Defaults
################################################################################

SETTINGS_FILE_NAME = '.hygiene.local.yml'

DEFAULT_COPYRIGHT_OWNER = 'The Hygiene Authors'

LICENSE_MARKER = 'Licensed under the Apache License, Version 2.0'

LICENSE_HEADER = '''\
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.'''


class SettingsError(ValueError):
    pass

################################################################################
# Settings
################################################################################

@dataclass(frozen=True)
class Settings:
    copyright_owner: str = DEFAULT_COPYRIGHT_OWNER

    # Files checked with the canonical formatter
    format_files: List[str] = field(default_factory=lambda: ['*.go'])
    # Files that need copyright and license headers
    header_files: List[str] = field(default_factory=lambda: ['*.go', '*.py'])
    # Generated test-suite entry points
    suite_files: List[str] = field(default_factory=lambda: ['*_suite_test.go'])
    # Any test file
    test_files: List[str] = field(default_factory=lambda: ['*_test.go'])

    suite_hook: str = 'logf.SetLogger'
    focus_markers: List[str] = field(default_factory=lambda: ['FIt(', 'FDescribe('])

    year: Optional[int] = None

    # Where the overrides were read from, if anywhere
    source: Optional[Path] = None

    @property
    def current_year(self) -> int:
        if self.year is not None:
            return self.year
        return datetime.date.today().year

    def with_overrides(self, overrides: Dict[str, Any], source: Optional[Path] = None) -> 'Settings':
        known = {f.name: f for f in dataclasses.fields(self) if f.name != 'source'}
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in known:
                raise SettingsError(f"Unknown setting '{key}' in {source or 'overrides'}")
            changes[key] = _coerce(key, value, getattr(self, key), source)
        return dataclasses.replace(self, source=source, **changes)


def _coerce(key: str, value: Any, default: Any, source: Optional[Path]) -> Any:
    where = source or 'overrides'
    if key == 'year':
        if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
            raise SettingsError(f"Setting '{key}' in {where} must be an integer, got {value!r}")
        return value
    if isinstance(default, list):
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise SettingsError(f"Setting '{key}' in {where} must be a list of strings, got {value!r}")
        return list(value)
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Setting '{key}' in {where} must be a non-empty string, got {value!r}")
    return value.strip()


def load_settings(root: Path, path: Optional[Path] = None) -> Settings:
    """
    Loads the policy settings for the repository at `root`.

    The override file is optional: when `path` is not given, `SETTINGS_FILE_NAME`
    at the repository root is used if it exists, and the defaults otherwise.
    An explicitly given `path` must exist.
    """
    settings = Settings()

    if path is None:
        path = root / SETTINGS_FILE_NAME
        if not path.exists():
            logger.debug(f"No settings file at {path}, using defaults")
            return settings
    elif not path.exists():
        raise SettingsError(f"Settings file does not exist: {path}")

    try:
        with open(path, 'rt', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Failed to parse {path}: {e}") from e

    if data is None:
        return dataclasses.replace(settings, source=path)
    if not isinstance(data, dict):
        raise SettingsError(f"Expected a mapping in {path}, got {type(data).__name__}")

    logger.debug(f"Loaded settings overrides from {path}: {sorted(data)}")
    return settings.with_overrides(data, source=path)
