import re
import pytest

from componentresolver import ComponentResolver
from componentresolver.models import ReadmeRecord
from componentresolver.exceptions import (
    ComponentNotFoundError,
    ConfigValidationError,
    ExamplesDisabledError,
    PatternParseError,
    ReadmesDisabledError,
)
from conftest import BUTTON_DATA


def make_resolver(root, **options) -> ComponentResolver:
    options.setdefault("watch", False)
    return ComponentResolver(root_directory=str(root), **options)


class TestComponents:
    """Listing and resolving components from pattern.json files."""

    @pytest.mark.asyncio
    async def test_lists_all_components(self, valid_root):
        resolver = make_resolver(valid_root)
        components = await resolver.get_components()
        assert sorted(components) == ['atoms/button', 'atoms/radio', 'helper/typography']

    @pytest.mark.asyncio
    async def test_lists_components_of_one_type(self, valid_root):
        resolver = make_resolver(valid_root)
        components = await resolver.get_components('atoms')
        assert sorted(components) == ['atoms/button', 'atoms/radio']

    @pytest.mark.asyncio
    async def test_type_scope_does_not_match_sibling_prefix(self, valid_root):
        (valid_root / "atomsx" / "thing").mkdir(parents=True)
        (valid_root / "atomsx" / "thing" / "pattern.json").write_text("{}")
        resolver = make_resolver(valid_root)
        assert sorted(await resolver.get_components('atoms')) == ['atoms/button', 'atoms/radio']

    @pytest.mark.asyncio
    async def test_lists_component_types(self, valid_root):
        resolver = make_resolver(valid_root)
        assert await resolver.get_component_types() == ['atoms', 'helper']

    @pytest.mark.asyncio
    async def test_component_types_do_not_parse_files(self, invalid_root):
        resolver = make_resolver(invalid_root)
        assert await resolver.get_component_types() == ['atoms']

    @pytest.mark.asyncio
    async def test_returns_component(self, valid_root):
        resolver = make_resolver(valid_root)
        component = await resolver.get_component('atoms/button')
        assert component.model_dump() == {
            'meta_file': (valid_root / 'atoms/button/pattern.json').as_posix(),
            'directory': (valid_root / 'atoms/button').as_posix(),
            'path': 'atoms/button',
            'type': 'atoms',
            'name': 'button',
            'data': BUTTON_DATA,
        }

    @pytest.mark.asyncio
    async def test_identity_comes_from_location_not_content(self, valid_root):
        (valid_root / "atoms/radio/pattern.json").write_text('{"name": "checkbox", "type": "molecules"}')
        resolver = make_resolver(valid_root)
        component = await resolver.get_component('atoms/radio')
        assert (component.type, component.name) == ('atoms', 'radio')
        assert component.data['name'] == 'checkbox'

    @pytest.mark.asyncio
    async def test_throws_on_unknown_component(self, valid_root):
        resolver = make_resolver(valid_root)
        with pytest.raises(ComponentNotFoundError, match='Could not resolve component "fancy/fancy"') as excinfo:
            await resolver.get_component('fancy/fancy')
        assert excinfo.value.component_path == 'fancy/fancy'

    @pytest.mark.asyncio
    async def test_throws_if_a_json_contains_errors(self, invalid_root):
        resolver = make_resolver(invalid_root)
        invalid_file = (invalid_root / 'atoms/button/pattern.json').as_posix()
        expected = f'Failed to parse "{invalid_file}" JSONDecodeError: '
        with pytest.raises(PatternParseError, match=re.escape(expected)) as excinfo:
            await resolver.get_components()
        assert excinfo.value.filepath == invalid_file

    @pytest.mark.asyncio
    async def test_parse_errors_are_not_cached(self, invalid_root):
        resolver = make_resolver(invalid_root)
        with pytest.raises(PatternParseError):
            await resolver.get_components()
        (invalid_root / 'atoms/button/pattern.json').write_text('{"title": "button"}')
        components = await resolver.get_components()
        assert components['atoms/button'].data == {'title': 'button'}

    @pytest.mark.asyncio
    async def test_results_are_cached_until_invalidated(self, valid_root):
        resolver = make_resolver(valid_root)
        first = await resolver.get_component('atoms/radio')
        (valid_root / "atoms/radio/pattern.json").write_text('{"title": "changed"}')
        assert (await resolver.get_component('atoms/radio')) is first

        resolver.invalidate()
        assert (await resolver.get_component('atoms/radio')).data == {'title': 'changed'}


class TestTemplates:
    """Main templates and element (sub) templates."""

    @pytest.mark.asyncio
    async def test_lists_main_templates(self, valid_root):
        resolver = make_resolver(valid_root)
        templates = await resolver.get_component_templates(str(valid_root / 'atoms/button'))
        assert [(t.name, t.content) for t in templates] == [('button', '<button>{{label}}</button>')]

    @pytest.mark.asyncio
    async def test_sub_templates_are_named_after_their_directory(self, valid_root):
        resolver = make_resolver(valid_root)
        templates = await resolver.get_component_sub_templates(str(valid_root / 'atoms/button'))
        assert len(templates) == 1
        assert templates[0].name == 'icon'
        assert templates[0].filepath == (valid_root / 'atoms/button/elements/icon/icon.hbs').as_posix()

    @pytest.mark.asyncio
    async def test_component_without_sub_templates(self, valid_root):
        resolver = make_resolver(valid_root)
        assert await resolver.get_component_sub_templates(str(valid_root / 'atoms/radio')) == []


class TestExamples:
    """Example discovery, classification and rendering."""

    @pytest.mark.asyncio
    async def test_fails_listing_examples_if_deactivated(self, valid_root):
        resolver = make_resolver(valid_root)
        with pytest.raises(ExamplesDisabledError, match='component resolver: examples are deactivated'):
            await resolver.get_component_examples(str(valid_root / 'atoms/button'))

    @pytest.mark.asyncio
    async def test_lists_examples(self, valid_root):
        resolver = make_resolver(valid_root, examples=True)
        button_directory = valid_root / 'atoms/button'
        examples = await resolver.get_component_examples(str(button_directory))
        assert [example.model_dump() for example in examples] == [
            {
                'name': '_hidden',
                'filepath': (button_directory / '_example/_hidden.hbs').as_posix(),
                'content': 'This example should not be deployed',
                'main': False,
                'hidden': True,
            },
            {
                'name': 'example',
                'filepath': (button_directory / '_example/example.hbs').as_posix(),
                'content': 'Hello World',
                'main': True,
                'hidden': False,
            },
        ]

    @pytest.mark.asyncio
    async def test_component_without_examples(self, valid_root):
        resolver = make_resolver(valid_root, examples=True)
        assert await resolver.get_component_examples(str(valid_root / 'atoms/radio')) == []

    @pytest.mark.asyncio
    async def test_custom_example_folder(self, valid_root):
        (valid_root / 'atoms/radio/demo').mkdir()
        (valid_root / 'atoms/radio/demo/checked.hbs').write_text('checked')
        resolver = make_resolver(valid_root, examples=True, example_folder_name='demo')
        examples = await resolver.get_component_examples(str(valid_root / 'atoms/radio'))
        assert [example.name for example in examples] == ['checked']
        assert await resolver.get_component_examples(str(valid_root / 'atoms/button')) == []

    @pytest.mark.asyncio
    async def test_renderer_receives_resolver_and_record(self, valid_root):
        calls = []

        def renderer(owner, record):
            calls.append(owner)
            return {'name': record.name, 'html': record.content.upper()}

        resolver = make_resolver(valid_root, examples=True, example_renderer=renderer)
        examples = await resolver.get_component_examples(str(valid_root / 'atoms/button'))
        assert examples == [
            {'name': '_hidden', 'html': 'THIS EXAMPLE SHOULD NOT BE DEPLOYED'},
            {'name': 'example', 'html': 'HELLO WORLD'},
        ]
        assert calls == [resolver, resolver]

    @pytest.mark.asyncio
    async def test_async_renderer(self, valid_root):
        async def renderer(owner, record):
            component = await owner.get_component('atoms/button')
            return f"{component.data['title']}: {record.content}"

        resolver = make_resolver(valid_root, examples=True, example_renderer=renderer)
        examples = await resolver.get_component_examples(str(valid_root / 'atoms/button'))
        assert examples == ['button: This example should not be deployed', 'button: Hello World']


class TestReadme:
    """Readme lookup and rendering."""

    @pytest.mark.asyncio
    async def test_throws_if_readme_deactivated(self, valid_root):
        resolver = make_resolver(valid_root, readme=False)
        with pytest.raises(ReadmesDisabledError, match='component resolver: readmes are deactivated'):
            await resolver.get_component_readme('atoms/button')

    @pytest.mark.asyncio
    async def test_returns_none_if_no_file_exists(self, valid_root):
        resolver = make_resolver(valid_root, readme=True)
        assert await resolver.get_component_readme(str(valid_root / 'atoms/button')) is None

    @pytest.mark.asyncio
    async def test_returns_readme(self, valid_root):
        resolver = make_resolver(valid_root, readme=True)
        typography_directory = valid_root / 'helper/typography'
        readme = await resolver.get_component_readme(str(typography_directory))
        assert readme == ReadmeRecord(
            filepath=(typography_directory / 'readme.md').as_posix(),
            content='Please read me!',
        )

    @pytest.mark.asyncio
    async def test_relative_component_path(self, valid_root):
        resolver = make_resolver(valid_root)
        readme = await resolver.get_component_readme('helper/typography')
        assert readme.content == 'Please read me!'

    @pytest.mark.asyncio
    async def test_readme_renderer(self, valid_root):
        resolver = make_resolver(valid_root, readme_renderer=lambda owner, record: f"<p>{record.content}</p>")
        assert await resolver.get_component_readme('helper/typography') == '<p>Please read me!</p>'


class TestLifecycle:
    """Construction, options and shutdown."""

    def test_missing_root_directory(self):
        with pytest.raises(ConfigValidationError, match='root_directory not specified'):
            ComponentResolver()

    def test_unknown_option_is_rejected(self, valid_root):
        with pytest.raises(ConfigValidationError):
            ComponentResolver(root_directory=str(valid_root), colour='blue')

    def test_root_is_made_absolute(self, valid_root, monkeypatch):
        monkeypatch.chdir(valid_root.parent)
        resolver = make_resolver('components')
        assert resolver.root == valid_root.as_posix()

    def test_disabled_features_have_no_index(self, valid_root):
        resolver = make_resolver(valid_root, examples=False, readme=False)
        assert resolver.examples is None
        assert resolver.readmes is None

    @pytest.mark.asyncio
    async def test_context_manager_closes_coordinator(self, valid_root):
        async with make_resolver(valid_root, examples=True) as resolver:
            assert len(resolver.coordinator.rules) == 5
            await resolver.get_components()
        assert resolver.coordinator.rules == []
        assert not resolver.watching
