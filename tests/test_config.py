import os
import sys

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from kmeans import InvalidConfiguration
from kmeans.benchmark import build_parser
from kmeans.config import RunConfig


def test_defaults_match_reference_scenario():
    config = RunConfig()
    assert (config.size, config.dimensions, config.clusters, config.iterations) == (150, 2, 8, 10)
    assert config.init == 'fixed'


def test_init_is_normalized():
    assert RunConfig(init='RANDOM').init == 'random'


@pytest.mark.parametrize("kwargs", [
    dict(size=0),
    dict(dimensions=0),
    dict(clusters=0),
    dict(iterations=-1),
    dict(size=4, clusters=5),
    dict(dtype='complex128'),
    dict(dtype='not-a-dtype'),
    dict(init='k-means++'),
])
def test_invalid_config(kwargs):
    with pytest.raises(InvalidConfiguration):
        RunConfig(**kwargs)


def test_from_args():
    args = build_parser().parse_args(['--size', '40', '--clusters', '3', '--init', 'random', '--seed', '5'])
    config = RunConfig.from_args(args)
    assert config.size == 40
    assert config.clusters == 3
    assert config.init == 'random'
    assert config.seed == 5
    assert config.init_indices is None
