import pytest
import yaml
from pathlib import Path

from componentresolver.config import ResolverOptions, build_options, load_options, passthrough_renderer
from componentresolver.exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
)

BASE_OPTIONS = {
    'root_directory': '/workspace/components',
    'examples': True,
    'readme': False,
    'example_folder_name': 'demo',
}


@pytest.fixture
def create_config_file(tmp_path: Path):
    """A pytest fixture to create a temporary resolver.yml file."""
    def _create_file(config_data) -> Path:
        config_file = tmp_path / "resolver.yml"
        with open(config_file, 'w') as f:
            yaml.dump(config_data, f)
        return config_file
    return _create_file


class TestDefaults:
    """Tests for option defaults and derived values."""

    def test_defaults(self):
        options = build_options(root_directory='components')
        assert options.watch is True
        assert options.examples is False
        assert options.readme is True
        assert options.cache_examples is True
        assert options.example_folder_name == '_example'
        assert options.pattern_expression == '*/*/pattern.json'
        assert options.main_template == '*/*/*.hbs'
        assert options.sub_template == '*/*/elements/*/*.hbs'
        assert options.readme_expression == '**/readme.md'
        assert options.example_renderer is passthrough_renderer

    def test_example_expression_follows_folder_name(self):
        assert build_options(root_directory='c').resolved_example_expression == '*/*/_example/*.*'
        assert build_options(root_directory='c', example_folder_name='demo').resolved_example_expression == '*/*/demo/*.*'

    def test_explicit_example_expression_wins(self):
        options = build_options(root_directory='c', example_expression='*/*/examples/*.html')
        assert options.resolved_example_expression == '*/*/examples/*.html'


class TestValidation:
    """Tests for rejected options."""

    def test_missing_root_directory(self):
        with pytest.raises(ConfigValidationError, match="root_directory not specified"):
            build_options(examples=True)

    def test_empty_root_directory(self):
        with pytest.raises(ConfigValidationError, match="root_directory not specified"):
            build_options(root_directory='')

    def test_unknown_option(self):
        with pytest.raises(ConfigValidationError, match="colour"):
            build_options(root_directory='c', colour='blue')

    def test_nested_example_folder_name(self):
        with pytest.raises(ConfigValidationError, match="single directory name"):
            build_options(root_directory='c', example_folder_name='a/b')

    def test_absolute_glob_expression(self):
        with pytest.raises(ConfigValidationError, match="relative to root_directory"):
            build_options(root_directory='c', pattern_expression='/*/*/pattern.json')

    def test_invalid_glob_expression(self):
        with pytest.raises(ConfigValidationError, match="invalid glob expression"):
            build_options(root_directory='c', readme_expression='**readme.md')

    def test_options_instance_is_reused(self):
        options = ResolverOptions(root_directory='c')
        assert build_options(options) is options
        assert build_options(options, examples=True).examples is True


class TestConfigLoading:
    """Tests for loading options from YAML files."""

    def test_load_valid_config_successfully(self, create_config_file):
        """Should load a well-formed options file without raising exceptions."""
        config_path = create_config_file(BASE_OPTIONS)
        options = load_options(str(config_path))
        assert options.root_directory == '/workspace/components'
        assert options.examples is True
        assert options.readme is False
        assert options.resolved_example_expression == '*/*/demo/*.*'

    def test_relative_root_is_resolved_against_config_file(self, create_config_file, tmp_path):
        config_path = create_config_file({'root_directory': 'components'})
        options = load_options(str(config_path))
        assert options.root_directory == (tmp_path / 'components').as_posix()

    def test_overrides_win(self, create_config_file):
        renderer = lambda resolver, record: record.content  # noqa: E731
        config_path = create_config_file(BASE_OPTIONS)
        options = load_options(str(config_path), readme=True, readme_renderer=renderer)
        assert options.readme is True
        assert options.readme_renderer is renderer

    def test_unknown_key_is_rejected(self, create_config_file):
        config_path = create_config_file({**BASE_OPTIONS, 'rootDirectory': 'components'})
        with pytest.raises(ConfigValidationError, match="rootDirectory"):
            load_options(str(config_path))

    def test_file_not_found_raises_error(self, tmp_path):
        with pytest.raises(ConfigFileMissingError):
            load_options(str(tmp_path / "non_existent_file.yml"))

    def test_invalid_yaml_raises_error(self, tmp_path):
        """Should raise ConfigParsingError for malformed YAML."""
        config_file = tmp_path / "invalid.yml"
        config_file.write_text("key: value: another")  # Invalid YAML

        with pytest.raises(ConfigParsingError, match="Error parsing YAML file"):
            load_options(str(config_file))

    def test_non_mapping_raises_error(self, create_config_file):
        config_path = create_config_file(['root_directory', 'components'])
        with pytest.raises(ConfigParsingError, match="dictionary"):
            load_options(str(config_path))

    def test_empty_file_misses_root(self, tmp_path):
        config_file = tmp_path / "empty.yml"
        config_file.write_text("")
        with pytest.raises(ConfigValidationError, match="root_directory not specified"):
            load_options(str(config_file))
