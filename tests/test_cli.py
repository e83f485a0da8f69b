import json
import pytest
import yaml
from click.testing import CliRunner

from componentresolver import __version__
from componentresolver.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(cli, [str(arg) for arg in args])


class TestCommands:
    def test_version(self, runner):
        result = invoke(runner, '--version')
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_types(self, runner, valid_root):
        result = invoke(runner, 'types', valid_root)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ['atoms', 'helper']

    def test_components_by_type(self, runner, valid_root):
        result = invoke(runner, 'components', valid_root, '-t', 'atoms')
        assert result.exit_code == 0, result.output
        components = json.loads(result.stdout)
        assert sorted(components) == ['atoms/button', 'atoms/radio']
        assert components['atoms/button']['data']['id'] == 189

    def test_show(self, runner, valid_root):
        result = invoke(runner, 'show', valid_root, 'atoms/button')
        assert result.exit_code == 0, result.output
        shown = json.loads(result.stdout)
        assert shown['component']['name'] == 'button'
        assert shown['templates'] == ['button']
        assert shown['sub_templates'] == ['icon']

    def test_examples(self, runner, valid_root):
        result = invoke(runner, 'examples', valid_root, 'atoms/button')
        assert result.exit_code == 0, result.output
        assert [e['name'] for e in json.loads(result.stdout)] == ['_hidden', 'example']

    def test_readme(self, runner, valid_root):
        result = invoke(runner, 'readme', valid_root, 'helper/typography')
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)['content'] == 'Please read me!'

    def test_missing_readme_prints_nothing(self, runner, valid_root):
        result = invoke(runner, 'readme', valid_root, 'atoms/button')
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_config_file(self, runner, valid_root, tmp_path):
        config = tmp_path / 'resolver.yml'
        config.write_text(yaml.dump({'example_folder_name': 'missing'}))
        result = invoke(runner, 'examples', valid_root, 'atoms/button', '-c', config)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []

    def test_watch_for_a_while(self, runner, valid_root):
        result = invoke(runner, 'watch', valid_root, '--duration', '0.2')
        assert result.exit_code == 0, result.output


class TestErrors:
    def test_unknown_component_aborts(self, runner, valid_root):
        result = invoke(runner, 'show', valid_root, 'fancy/fancy')
        assert result.exit_code == 1

    def test_parse_error_aborts(self, runner, invalid_root):
        result = invoke(runner, 'components', invalid_root)
        assert result.exit_code == 1

    def test_bad_config_aborts(self, runner, valid_root, tmp_path):
        config = tmp_path / 'resolver.yml'
        config.write_text(yaml.dump({'unknown': True}))
        result = invoke(runner, 'types', valid_root, '--config', config)
        assert result.exit_code == 1
