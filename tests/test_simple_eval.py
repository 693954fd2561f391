import numpy as np
import pandas as pd
import pytest
from fitdt import InvalidInputError
from fitdt.evaluation.simple_eval import (
    perform_prediction, perform_basic_evaluation, perform_export, perform_parity_check,
    check_copies_parity, host_device_divergence, sample_parity_grid,
)
from fitdt.custom_models.dt.model_v1 import predict


def test_perform_prediction(make_args):
    assert perform_prediction(make_args('--features', '29.5', '0', '24.95', '0.5')) == 1
    assert perform_prediction(make_args('--features', '50', '0', '0', '1')) == 3


def test_perform_prediction_short_vector(make_args):
    with pytest.raises(InvalidInputError):
        perform_prediction(make_args('--features', '1', '2', '3'))


def test_basic_evaluation_scores_labels(make_args, labelled_csv):
    y_pred, score = perform_basic_evaluation(make_args('--dataset-file', str(labelled_csv)))
    assert y_pred.tolist() == [2, 1, 1, 0, 5, 4, 4, 3, 2]
    assert score == pytest.approx(1.0)


def test_basic_evaluation_f1(make_args, labelled_csv):
    _, score = perform_basic_evaluation(make_args('--dataset-file', str(labelled_csv), '--accuracy-metric', 'f1'))
    assert score == pytest.approx(1.0)


def test_basic_evaluation_writes_predictions(make_args, unlabelled_csv, tmp_path):
    out = tmp_path / 'predictions.csv'
    y_pred, score = perform_basic_evaluation(
        make_args('--dataset-file', str(unlabelled_csv), '--predictions-file', str(out))
    )
    assert score is None
    written = pd.read_csv(out)
    assert list(written.columns) == ['age', 'unused', 'bmi', 'active', 'prediction']
    assert written['prediction'].tolist() == y_pred.tolist() == [1, 3]


def test_perform_export_with_inputs(make_args, labelled_csv, tmp_path):
    header = tmp_path / 'model_v1.h'
    inputs = tmp_path / 'x_test.txt'
    metadata = perform_export(make_args(
        '--export-header', str(header), '--header-precision', 'short',
        '--dataset-file', str(labelled_csv), '--inputs-file', str(inputs),
    ))
    assert metadata['inputs'] == ['x0', 'x2', 'x3']
    assert 'x[2] <= 24.95)' in header.read_text()

    lines = inputs.read_text().splitlines()
    assert len(lines) == 9
    assert lines[0] == '0.0 0.0 0.0 0.0'
    assert lines[-1] == '29.5 0.0 24.95 0.5'


def test_parity_grid_covers_every_class():
    x = sample_parity_grid(5)
    assert x.dtype == np.float32
    assert x.shape[1] == 4
    assert np.all(x[:, 1] == 0)
    assert np.float32(24.95) in x[:, 2]


def test_copies_agree_with_canonical_tree():
    num_vectors, mismatches = check_copies_parity(num_points=9)
    assert num_vectors > 0
    assert mismatches == {'export@float32': 0, 'sketch@float32': 0, 'export@double': 0}


def test_host_and_device_differ_only_at_float32_of_rest_threshold():
    diverging = host_device_divergence(num_points=9)
    assert len(diverging) > 0
    assert np.all(diverging[:, 2] == np.float32(24.95))
    assert np.all(diverging[:, 3] <= 0.5)
    assert np.all(diverging[:, 0] <= 29.5)
    for row in diverging.astype(np.float64).tolist():
        assert predict(row) == 1


def test_perform_parity_check(make_args):
    num_vectors, mismatches = perform_parity_check(make_args('--check-parity', '--grid-points', '5'))
    assert not any(mismatches.values())
