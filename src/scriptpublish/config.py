from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

CONFIG_DEFAULT = 'publish.config.yaml'

DEFAULT_GITHUB_USER = 'jmerhar'
DEFAULT_SCRIPTS_REPO = 'scripts'
DEFAULT_TAP_REPO = 'homebrew-scripts'
DEFAULT_MAINTAINER = 'Jure Merhar <dev@merhar.si>'
DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_PACKAGING_TOOL = 'dpkg-deb'

_TOKEN_VARS = ('GITHUB_TOKEN', 'GH_TOKEN', 'GITHUB_PAT')


class ConfigError(RuntimeError):
    pass


@dataclass
class PublishConfig:
    github_user: str = DEFAULT_GITHUB_USER
    scripts_repo: str = DEFAULT_SCRIPTS_REPO
    tap_repo: str = DEFAULT_TAP_REPO
    maintainer: str = DEFAULT_MAINTAINER
    # Directory holding both the scripts repository and the tap repository
    workspace_root: Path = field(default_factory=lambda: Path.cwd().parent)
    api_url: str = DEFAULT_API_URL
    github_token: str | None = None
    # None keeps every request blocking until the server answers
    request_timeout: float | None = None
    build_deb: bool = True
    packaging_tool: str = DEFAULT_PACKAGING_TOOL
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = 'INFO'

    @property
    def source_root(self) -> Path:
        return self.workspace_root / self.scripts_repo

    @property
    def tap_root(self) -> Path:
        return self.workspace_root / self.tap_repo

    @property
    def formula_dir(self) -> Path:
        return self.tap_root / 'Formula'

    @property
    def homepage(self) -> str:
        return f'https://github.com/{self.github_user}/{self.scripts_repo}'

    @property
    def repo_slug(self) -> str:
        return f'{self.github_user}/{self.scripts_repo}'


def _resolve_env_var(value: Any, env_var_name: str | None = None) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        env_name = env_var_name or value[1:]
        return os.getenv(env_name, value)
    return value


def resolve_github_token(explicit: str | None = None) -> str | None:
    """Return the configured token, falling back to the usual environment names."""
    if explicit and not explicit.startswith('$'):
        return explicit
    for var in _TOKEN_VARS:
        token = os.getenv(var)
        if token:
            return token
    return None


def _load_env_file(dotenv_path: str | None) -> None:
    candidate = Path(dotenv_path or '.env')
    if candidate.exists():
        load_dotenv(str(candidate))


def _parse_timeout(value: Any) -> float | None:
    if value is None or value == '':
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Invalid request timeout: {value!r}') from exc
    return timeout if timeout > 0 else None


def load_config(path: str | Path | None = None) -> PublishConfig:
    """Load a ``PublishConfig`` from YAML.

    ``path=None`` looks for ``publish.config.yaml`` in the working directory and
    falls back to built-in defaults when it is absent. An explicit path that does
    not exist is an error.
    """
    if path is None:
        p = Path(CONFIG_DEFAULT)
        if not p.exists():
            return config_from_mapping({})
    else:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f'Configuration file not found: {p}')
    try:
        raw_any = yaml.safe_load(p.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(raw_any, dict):
        raise ConfigError(f'Configuration in {p} must be a mapping')
    return config_from_mapping(cast(dict[str, Any], raw_any), base_dir=p.resolve().parent)


def config_from_mapping(
    raw: dict[str, Any], *, base_dir: Path | None = None
) -> PublishConfig:
    gh = cast(dict[str, Any], raw.get('github', {}) or {})
    repos = cast(dict[str, Any], raw.get('repositories', {}) or {})
    debian = cast(dict[str, Any], raw.get('debian', {}) or {})
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    env = cast(dict[str, Any], raw.get('environment', {}) or {})

    if bool(env.get('load_dotenv', True)):
        _load_env_file(env.get('dotenv_path'))

    workspace_any = repos.get('workspace_root')
    if workspace_any:
        workspace_root = Path(str(_resolve_env_var(workspace_any))).expanduser()
        if not workspace_root.is_absolute() and base_dir is not None:
            workspace_root = base_dir / workspace_root
    else:
        workspace_root = Path.cwd().parent

    return PublishConfig(
        github_user=str(_resolve_env_var(gh.get('user', DEFAULT_GITHUB_USER))),
        scripts_repo=str(repos.get('scripts', DEFAULT_SCRIPTS_REPO)),
        tap_repo=str(repos.get('tap', DEFAULT_TAP_REPO)),
        maintainer=str(_resolve_env_var(debian.get('maintainer', DEFAULT_MAINTAINER))),
        workspace_root=workspace_root,
        api_url=str(gh.get('api_url', DEFAULT_API_URL)),
        github_token=resolve_github_token(_resolve_env_var(gh.get('token'))),
        request_timeout=_parse_timeout(gh.get('timeout')),
        build_deb=bool(debian.get('enabled', True)),
        packaging_tool=str(debian.get('tool', DEFAULT_PACKAGING_TOOL)),
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=str(logging_config.get('level', 'INFO')),
    )


__all__ = [
    'CONFIG_DEFAULT',
    'ConfigError',
    'PublishConfig',
    'config_from_mapping',
    'load_config',
    'resolve_github_token',
]
