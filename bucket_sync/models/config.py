"""
Configuration classes for the bucket sync step.
"""
import json
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..exceptions import ConfigurationError

# Pattern used when a metadata setting is a single value instead of a map.
MATCH_ALL_PATTERN = '.*'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class MetadataRules:
    """
    Ordered table of (regular expression, value) rules.

    Patterns are compiled when the table is built, so an invalid expression
    is reported as a configuration error before any file is transferred.
    Rules keep the order they were declared in.
    """
    rules: Tuple[Tuple[re.Pattern, str], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]]) -> 'MetadataRules':
        """Compile a pattern -> value mapping, preserving its iteration order."""
        compiled = []
        for pattern, value in (mapping or {}).items():
            try:
                compiled.append((re.compile(pattern), str(value)))
            except re.error as e:
                raise ConfigurationError(f"Invalid metadata pattern {pattern!r}: {e}") from e
        return cls(tuple(compiled))

    @classmethod
    def from_value(cls, raw: Optional[str]) -> 'MetadataRules':
        """
        Parse a raw setting: a JSON object of pattern -> value, or a plain
        value that applies to every file.
        """
        if raw is None or not raw.strip():
            return cls()

        try:
            parsed = json.loads(raw)
        except ValueError:
            return cls.from_mapping({MATCH_ALL_PATTERN: raw})

        if isinstance(parsed, dict):
            return cls.from_mapping(parsed)
        if isinstance(parsed, str):
            return cls.from_mapping({MATCH_ALL_PATTERN: parsed})
        if not isinstance(parsed, list):
            # numbers, booleans and null are plain values too
            return cls.from_mapping({MATCH_ALL_PATTERN: raw.strip()})
        raise ConfigurationError(f"Metadata rules must be a JSON object or a single value, got: {raw!r}")

    def __iter__(self) -> Iterator[Tuple[re.Pattern, str]]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def as_dict(self) -> Dict[str, str]:
        return {pattern.pattern: value for pattern, value in self.rules}


RuleSource = Union[MetadataRules, Mapping[str, str], None]


def as_rules(value: RuleSource) -> MetadataRules:
    if isinstance(value, MetadataRules):
        return value
    return MetadataRules.from_mapping(value)


def _env(*names: str, default: str = '') -> str:
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _env_bool(name: str) -> bool:
    return os.getenv(name, 'false').strip().lower() in _TRUE_VALUES


def _env_list(name: str) -> List[str]:
    """Parse a comma separated list or a JSON array."""
    raw = os.getenv(name, '').strip()
    if not raw:
        return []
    if raw.startswith('['):
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            raise ConfigurationError(f"{name} is not a valid JSON list: {e}") from e
        return [str(item) for item in parsed if str(item)]
    return [item.strip() for item in raw.split(',') if item.strip()]


@dataclass(frozen=True)
class PluginConfig:
    """Immutable settings for one run of the sync step."""
    bucket: str
    endpoint: str = ''
    region: str = 'us-east-1'
    access: str = 'private'
    encryption: str = ''
    storage_class: str = ''
    source: str = ''
    target: str = ''
    strip_prefix: str = ''
    exclude: Tuple[str, ...] = ()
    content_type: MetadataRules = field(default_factory=MetadataRules)
    content_encoding: MetadataRules = field(default_factory=MetadataRules)
    cache_control: MetadataRules = field(default_factory=MetadataRules)
    path_style: bool = False
    download: bool = False
    dry_run: bool = False
    access_key: str = field(default='', repr=False)
    secret_key: str = field(default='', repr=False)
    assume_role: str = ''
    assume_role_session_name: str = 'drone'
    user_role_arn: str = ''

    def __post_init__(self):
        if not self.bucket:
            raise ConfigurationError("A bucket name is required")
        if not self.download and not self.source:
            raise ConfigurationError("A source pattern is required in upload mode")

        # Frozen dataclass: normalize field types in place once.
        object.__setattr__(self, 'exclude', tuple(self.exclude or ()))
        for name in ('content_type', 'content_encoding', 'cache_control'):
            object.__setattr__(self, name, as_rules(getattr(self, name)))

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key and self.secret_key)

    @classmethod
    def from_env(cls) -> 'PluginConfig':
        """Create PluginConfig from the environment set by the CI runner."""
        return cls(
            endpoint=_env('PLUGIN_ENDPOINT'),
            access_key=_env('PLUGIN_ACCESS_KEY', 'AWS_ACCESS_KEY_ID'),
            secret_key=_env('PLUGIN_SECRET_KEY', 'AWS_SECRET_ACCESS_KEY'),
            assume_role=_env('PLUGIN_ASSUME_ROLE'),
            assume_role_session_name=_env('PLUGIN_ASSUME_ROLE_SESSION_NAME', default='drone'),
            user_role_arn=_env('PLUGIN_USER_ROLE_ARN'),
            bucket=_env('PLUGIN_BUCKET'),
            region=_env('PLUGIN_REGION', default='us-east-1'),
            access=_env('PLUGIN_ACL', default='private'),
            source=_env('PLUGIN_SOURCE'),
            target=_env('PLUGIN_TARGET'),
            strip_prefix=_env('PLUGIN_STRIP_PREFIX'),
            exclude=tuple(_env_list('PLUGIN_EXCLUDE')),
            encryption=_env('PLUGIN_ENCRYPTION'),
            content_type=MetadataRules.from_value(os.getenv('PLUGIN_CONTENT_TYPE')),
            content_encoding=MetadataRules.from_value(os.getenv('PLUGIN_CONTENT_ENCODING')),
            cache_control=MetadataRules.from_value(os.getenv('PLUGIN_CACHE_CONTROL')),
            storage_class=_env('PLUGIN_STORAGE_CLASS'),
            path_style=_env_bool('PLUGIN_PATH_STYLE'),
            download=_env_bool('PLUGIN_DOWNLOAD'),
            dry_run=_env_bool('PLUGIN_DRY_RUN'),
        )
