import argparse
import pytest
import pandas as pd
from fitdt.args import cmd_args, validate_args


@pytest.fixture
def make_args(tmp_path):
    """Parse command line arguments the way main.py does, without configuring logging."""
    def _make_args(*argv):
        parser = cmd_args(argparse.ArgumentParser())
        args = parser.parse_args(['--log-dir', str(tmp_path / 'logs'), *argv])
        validate_args(args)
        return args
    return _make_args


@pytest.fixture
def labelled_csv(tmp_path):
    # one row per leaf of the tree, plus a tie on every threshold
    data = pd.DataFrame({
        'x0':    [0.0, 29.5, 40.0, 50.0, 0.0, 29.5, 40.0, 50.0, 29.5],
        'x1':    [0.0, 7.0, 0.0, 0.0, 0.0, 3.0, 0.0, 0.0, 0.0],
        'x2':    [0.0, 30.0, 0.0, 0.0, 0.0, 30.0, 0.0, 0.0, 24.949999809265137],
        'x3':    [0.0, 0.0, 0.5, 0.0, 1.0, 1.0, 1.0, 1.0, 0.5],
        'label': [2, 1, 1, 0, 5, 4, 4, 3, 2],
    })
    path = tmp_path / 'labelled.csv'
    data.to_csv(path, index=False)
    return path


@pytest.fixture
def unlabelled_csv(tmp_path):
    data = pd.DataFrame({
        'age': [25.0, 60.0],
        'unused': [1.0, 2.0],
        'bmi': [30.0, 20.0],
        'active': [0.0, 1.0],
    })
    path = tmp_path / 'unlabelled.csv'
    data.to_csv(path, index=False)
    return path
