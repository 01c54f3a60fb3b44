from dataclasses import fields
import argparse
import pytest

from lm_rank_tokenizer import ServiceConfig
from lm_rank_tokenizer.args_parser import ArgsParser


@pytest.fixture
def parser():
    return ArgsParser()


@pytest.fixture
def service_parser():
    return ArgsParser(known_keys=[f.name for f in fields(ServiceConfig)])


def test_init_default():
    parser = ArgsParser()
    assert isinstance(parser, argparse.ArgumentParser)
    assert parser.description is None


def test_parse_config_args_config_only(parser):
    config_path, overrides = parser.parse_config_args(['--config', 'service.yaml'])

    assert config_path == 'service.yaml'
    assert overrides == {}


def test_parse_config_args_with_overrides(service_parser):
    args = [
        '--config', 'service.yaml',
        '--override', 'port=9000',
        '--override', 'enable_download=true',
        '--override', 'vocab_extension=.tiktoken',
        '--override', 'preload=p50k_base,cl100k_base',
    ]
    _, overrides = service_parser.parse_config_args(args)

    assert overrides == {
        'port': 9000,
        'enable_download': True,
        'vocab_extension': '.tiktoken',
        'preload': ['p50k_base', 'cl100k_base'],
    }


@pytest.mark.parametrize("input_value, expected_output", [
    ("true", True),
    ("False", False),
    ("none", None),
    ("42", 42),
    ("2.5", 2.5),
    ('"quoted"', "quoted"),
    ("plain", "plain"),
    ("a,b,c", ["a", "b", "c"]),
    ("1,2,3", [1, 2, 3]),
])
def test_type_inference(input_value, expected_output, parser):
    args = ['--config', 'test.yaml', '--override', f'key={input_value}']

    _, overrides = parser.parse_config_args(args)

    assert overrides['key'] == expected_output


@pytest.mark.parametrize("args", [
    ([]),  # missing config when required
    (['--config', 'test.yaml', '--override', 'no_equals']),  # no equals sign
    (['--config', 'test.yaml', '--override', '=no_key']),  # equals at start
])
def test_error_cases(args, parser):
    """Test various error conditions that should raise SystemExit."""
    with pytest.raises(SystemExit):
        parser.parse_config_args(args)


def test_unknown_override_key_rejected(service_parser):
    with pytest.raises(SystemExit):
        service_parser.parse_config_args(['--config', 'service.yaml', '--override', 'learning_rate=0.1'])


def test_multiple_equals_in_override(parser):
    args = ['--config', 'test.yaml', '--override', 'vocab_dir=/data/a=b']
    _, overrides = parser.parse_config_args(args)

    assert overrides == {'vocab_dir': '/data/a=b'}


def test_require_config_false_no_config_provided():
    parser = ArgsParser(require_config=False)

    config_path, overrides = parser.parse_config_args(['--override', 'port=1'])

    assert config_path is None
    assert overrides == {'port': 1}


def test_overrides_build_a_valid_config(tmp_path, service_parser):
    config_file = tmp_path / "service.yaml"
    config_file.write_text("port: 8090\nalphabet: codepoint\n")

    config_path, overrides = service_parser.parse_config_args(
        ['--config', str(config_file), '--override', 'alphabet=byte', '--override', 'preload=o200k_base']
    )
    config = ServiceConfig.from_file(config_path, overrides)

    assert config.alphabet == 'byte'
    assert config.preload == ['o200k_base']
