import yaml
import logging
import posixpath
from typing import Any, Callable, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from . import constants
from .io import FileSystem, DiskFileSystem
from .exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
    CRPathNotFoundError,
)
from .utils.path import compile_glob, to_posix


logger = logging.getLogger(__name__)

# (resolver, record) -> rendered record, may return an awaitable
Renderer = Callable[[Any, Any], Any]


def passthrough_renderer(resolver, record):
    """Default renderer: hands the raw record back unchanged"""
    return record


class ResolverOptions(BaseModel):
    """
        Class Config-Validation Model describing the options of a ComponentResolver
    """
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root_directory: Optional[str] = None
    watch: bool = True
    examples: bool = False
    readme: bool = True
    cache_examples: bool = True
    example_folder_name: str = constants.DEFAULT_EXAMPLE_FOLDER_NAME
    example_expression: Optional[str] = None
    pattern_expression: str = constants.DEFAULT_PATTERN_EXPRESSION
    main_template: str = constants.DEFAULT_MAIN_TEMPLATE
    sub_template: str = constants.DEFAULT_SUB_TEMPLATE
    readme_expression: str = constants.DEFAULT_README_EXPRESSION
    example_renderer: Renderer = Field(default=passthrough_renderer)
    readme_renderer: Renderer = Field(default=passthrough_renderer)

    @model_validator(mode='after')
    def check_root_directory(self) -> 'ResolverOptions':
        """root_directory is the only required option"""
        if not self.root_directory:
            raise ConfigValidationError("root_directory not specified")
        return self

    @field_validator('example_folder_name')
    @classmethod
    def check_example_folder_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError(f"example_folder_name must be a single directory name, got '{value}'")
        return value

    @field_validator('pattern_expression', 'main_template', 'sub_template', 'readme_expression', 'example_expression')
    @classmethod
    def check_relative_expression(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value or value.startswith("/"):
            raise ValueError(f"glob expressions must be relative to root_directory, got '{value}'")
        try:
            compile_glob(value)
        except ValueError as e:
            raise ValueError(f"invalid glob expression '{value}': {e}") from e
        return value

    @property
    def resolved_example_expression(self) -> str:
        if self.example_expression:
            return self.example_expression
        return constants.EXAMPLE_EXPRESSION_TEMPLATE.format(folder=self.example_folder_name)


def build_options(options: Union[ResolverOptions, Dict[str, Any], None] = None, **overrides) -> ResolverOptions:
    """
    Validate user options (a ResolverOptions, a mapping and/or keyword arguments).

    Raises:
        ConfigValidationError: when validation fails or root_directory is missing
    """
    if isinstance(options, ResolverOptions):
        if not overrides:
            return options
        data = options.model_dump()
    else:
        data = dict(options or {})
    data.update(overrides)
    try:
        return ResolverOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Resolver options validation failed:\n{e}") from e


def load_options(config_path: str, fs: Optional[FileSystem] = None, **overrides) -> ResolverOptions:
    """
    Load resolver options from a YAML file.

    A relative root_directory is resolved against the directory of the file.
    Keyword overrides (e.g. renderers) win over the file content.
    """
    fs = fs or DiskFileSystem()
    path = fs.absolute(config_path)
    logger.info(f"Loading resolver options from '{path}'...")
    try:
        content = fs.read_text(path)
    except (FileNotFoundError, CRPathNotFoundError):
        raise ConfigFileMissingError(f"Options file not found at: {path}")
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Error parsing YAML file: {e}")
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigParsingError("Options file must be a YAML document containing a dictionary.")

    root = raw.get("root_directory")
    if root and not posixpath.isabs(to_posix(root)):
        raw["root_directory"] = posixpath.join(posixpath.dirname(path), to_posix(root))
    logger.debug(f"Successfully parsed YAML from '{path}'.")
    return build_options(raw, **overrides)
