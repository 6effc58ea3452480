"""
Tests for ProcessorRegistry dispatch
"""
import pytest

from helm_generator.errors import InvalidResourceError, ProcessorError
from helm_generator.processor import (
    NOT_PROCESSED,
    BaseProcessor,
    Context,
    ProcessorRegistry,
    Result,
    reference,
)
from helm_generator.processor.k8s import ConfigMapProcessor, GrafanaDashboardProcessor, default_registry
from helm_generator.resource import ResourceTypeKey

WIDGET_TYPE = ResourceTypeKey(group='example.com', version='v1', kind='Widget')


class RecordingProcessor(BaseProcessor):
    """Processor returning a canned outcome and recording every call"""

    def __init__(self, name, priority, outcome=None, calls=None, error=None):
        super().__init__(name, priority, WIDGET_TYPE)
        self.outcome = outcome
        self.calls = calls if calls is not None else []
        self.error = error

    def process(self, ctx, obj):
        self.calls.append(self.name)
        if self.error is not None:
            raise self.error
        return self.outcome


def claimed(name, **kwargs):
    return Result(processed=True, service_name=name, values={'by': name}, **kwargs)


def widget(name='w1'):
    return {
        'apiVersion': 'example.com/v1',
        'kind': 'Widget',
        'metadata': {'name': name, 'namespace': 'default'},
        'spec': {'size': 3},
    }


@pytest.fixture
def ctx():
    return Context(chart_name='mychart')


class TestDispatch:
    """Test priority ordering and fall-through"""

    def test_higher_priority_wins(self, ctx):
        calls = []
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('low', 80, claimed('low'), calls))
        registry.register(RecordingProcessor('high', 110, claimed('high'), calls))

        result = registry.dispatch(ctx, widget())

        assert result.values == {'by': 'high'}
        assert calls == ['high']

    def test_declined_falls_through_without_merging(self, ctx):
        calls = []
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('high', 110, NOT_PROCESSED, calls))
        registry.register(RecordingProcessor('low', 80, claimed('low'), calls))

        result = registry.dispatch(ctx, widget())

        assert result.values == {'by': 'low'}
        assert result.service_name == 'low'
        assert calls == ['high', 'low']

    def test_none_falls_through(self, ctx):
        calls = []
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('high', 110, None, calls))
        registry.register(RecordingProcessor('low', 80, claimed('low'), calls))

        assert registry.dispatch(ctx, widget()).values == {'by': 'low'}
        assert calls == ['high', 'low']

    def test_equal_priority_keeps_registration_order(self, ctx):
        calls = []
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('first', 100, claimed('first'), calls))
        registry.register(RecordingProcessor('second', 100, claimed('second'), calls))

        assert registry.dispatch(ctx, widget()).values == {'by': 'first'}
        assert [p.name for p in registry.get_processors(WIDGET_TYPE)] == ['first', 'second']

    def test_all_decline_returns_none(self, ctx):
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('a', 100, NOT_PROCESSED))
        registry.register(RecordingProcessor('b', 90, None))

        assert registry.dispatch(ctx, widget()) is None

    def test_unregistered_type_returns_none(self, ctx):
        registry = ProcessorRegistry()

        result = registry.dispatch(ctx, {'apiVersion': 'v1', 'kind': 'Service', 'metadata': {'name': 's'}})

        assert result is None

    def test_error_stops_dispatch(self, ctx):
        calls = []
        cause = RuntimeError('boom')
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('high', 110, calls=calls, error=cause))
        registry.register(RecordingProcessor('low', 80, claimed('low'), calls))

        with pytest.raises(ProcessorError) as exc_info:
            registry.dispatch(ctx, widget())

        assert calls == ['high']
        assert exc_info.value.processor_name == 'high'
        assert exc_info.value.__cause__ is cause
        assert 'Widget/default/w1' in str(exc_info.value)
        assert 'boom' in str(exc_info.value)

    @pytest.mark.parametrize('obj', [
        None,
        ['not', 'a', 'mapping'],
        {'kind': 'Widget'},
        {'apiVersion': 'example.com/v1'},
        {'apiVersion': 'example.com/v1', 'kind': 'Widget', 'metadata': 'oops'},
    ])
    def test_invalid_resource(self, ctx, obj):
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('any', 100, claimed('any')))

        with pytest.raises(InvalidResourceError):
            registry.dispatch(ctx, obj)

    def test_dependencies_are_deduplicated(self, ctx):
        secret = reference('Secret', 'creds', 'default')
        config = reference('ConfigMap', 'app', 'default')
        outcome = claimed('dup', dependencies=[secret, config, secret, config])
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('dup', 100, outcome))

        result = registry.dispatch(ctx, widget())

        assert result.dependencies == [secret, config]


class TestGenericFallback:
    """Test process() falling back to the generic template"""

    def test_generic_for_unhandled(self, ctx):
        registry = ProcessorRegistry()

        result = registry.process(ctx, widget('my-widget'))

        assert result.processed is True
        assert result.metadata['generic'] is True
        assert result.values == {'enabled': True, 'spec': {'size': 3}}
        assert result.values_path == 'services.myWidget.widget'
        assert result.template_path == 'templates/widget-my-widget.yaml'
        assert '.Values.services.myWidget.widget.enabled' in result.template_content
        assert 'kind: Widget' in result.template_content

    def test_generic_label_values_are_quoted(self, ctx):
        obj = widget()
        obj['metadata']['labels'] = {'version': 1.0, 'canary': True, 'team': 'core'}
        obj['metadata']['annotations'] = {'note': 'say "hi"'}

        template = ProcessorRegistry().process(ctx, obj).template_content

        assert '    version: "1.0"' in template
        assert '    canary: "true"' in template
        assert '    team: "core"' in template
        assert '    note: "say \\"hi\\""' in template

    def test_generic_without_service_name(self, ctx):
        obj = {'apiVersion': 'example.com/v1', 'kind': 'Widget', 'spec': {'size': 1}}

        result = ProcessorRegistry().process(ctx, obj)

        assert result.values_path == 'widget'
        assert '.Values.widget.enabled' in result.template_content
        assert '.Values.widget.spec' in result.template_content
        assert 'services..' not in result.template_content

    def test_claimed_result_is_not_generic(self, ctx):
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('w', 100, claimed('w')))

        assert registry.process(ctx, widget()).values == {'by': 'w'}


class TestLookups:
    """Test registry lookups"""

    def test_get_processor(self):
        registry = ProcessorRegistry()
        low = RecordingProcessor('low', 80)
        high = RecordingProcessor('high', 110)
        registry.register(low)
        registry.register(high)

        assert registry.get_processor(WIDGET_TYPE) is high
        assert registry.get_processor(ResourceTypeKey('', 'v1', 'Pod')) is None
        assert registry.all() == [low, high]
        assert registry.supported_types() == [WIDGET_TYPE]

    def test_get_processors_returns_copy(self):
        registry = ProcessorRegistry()
        registry.register(RecordingProcessor('a', 100))

        registry.get_processors(WIDGET_TYPE).clear()

        assert len(registry.get_processors(WIDGET_TYPE)) == 1


class TestDefaultRegistry:
    """Test built-in processor precedence"""

    def test_configmap_processors_ordered(self):
        registry = default_registry()
        processors = registry.get_processors(ResourceTypeKey('', 'v1', 'ConfigMap'))

        assert isinstance(processors[0], GrafanaDashboardProcessor)
        assert isinstance(processors[1], ConfigMapProcessor)

    def test_dashboard_claimed_by_grafana(self):
        registry = default_registry()
        obj = {
            'apiVersion': 'v1',
            'kind': 'ConfigMap',
            'metadata': {'name': 'dash', 'labels': {'grafana_dashboard': '1'}},
            'data': {'board.json': '{"title": "x"}'},
        }

        result = registry.dispatch(Context(chart_name='c'), obj)

        assert result.metadata['type'] == 'grafana_dashboard'
        assert 'dashboards' in result.values

    def test_plain_configmap_claimed_by_configmap(self):
        registry = default_registry()
        obj = {
            'apiVersion': 'v1',
            'kind': 'ConfigMap',
            'metadata': {'name': 'app-config'},
            'data': {'key': 'value'},
        }

        result = registry.dispatch(Context(chart_name='c'), obj)

        assert result.values_path == 'services.appConfig.configMaps.appConfig'
        assert result.values['data'] == {'key': 'value'}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
