import random

import pytest

from mnistnet.ann import create_ann
from mnistnet.matrix import Matrix
from mnistnet.mnist import IMAGE_SIZE
from mnistnet.train import (
    accuracy,
    dsigmoid,
    main,
    populate_minibatch,
    shuffle,
    sigmoid,
    train_epoch,
    zero_to_n,
)


def _images(count):
    return [bytes([(i * 37) % 256]) * IMAGE_SIZE for i in range(count)]


def _biased_net(winner, minibatch_size=2):
    nn = create_ann(0.05, minibatch_size, [IMAGE_SIZE, 2, 10], random.Random(0))
    nn.layers[2].weights = Matrix.zeros(10, 2)
    nn.layers[2].biases = Matrix.from_rows([[5.0] if r == winner else [-5.0] for r in range(10)])
    return nn


def _write_labels(path, labels):
    path.write_bytes(b"\x00\x00\x08\x01" + len(labels).to_bytes(4, "big") + bytes(labels))


def _write_images(path, images):
    header = b"\x00\x00\x08\x03" + len(images).to_bytes(4, "big") + (28).to_bytes(4, "big") * 2
    path.write_bytes(header + b"".join(images))


def test_zero_to_n():
    assert zero_to_n(5) == [0, 1, 2, 3, 4]
    assert zero_to_n(0) == []


def test_shuffle_is_permutation():
    t = shuffle(20, 20, random.Random(1))
    assert sorted(t) == list(range(20))


def test_shuffle_without_switches_is_identity():
    assert shuffle(6, 0, random.Random(1)) == list(range(6))


def test_shuffle_deterministic_for_seed():
    first = shuffle(15, 15, random.Random(9))
    second = shuffle(15, 15, random.Random(9))
    assert len(first) == 15
    assert sorted(first) == list(range(15))
    assert first == second


def test_sigmoid_properties():
    assert sigmoid(0.0) == 0.5
    for x in (-3.0, -0.5, 1.2, 4.0):
        assert sigmoid(x) + sigmoid(-x) == pytest.approx(1.0)
    assert sigmoid(-1000.0) == pytest.approx(0.0)
    assert sigmoid(1000.0) == pytest.approx(1.0)


def test_dsigmoid_properties():
    assert dsigmoid(0.0) == 0.25
    for x in (0.3, 1.5, 6.0):
        assert dsigmoid(x) == pytest.approx(dsigmoid(-x))
        assert 0.0 < dsigmoid(x) < dsigmoid(0.0)


def test_populate_minibatch_values():
    images = [bytes([255]) * IMAGE_SIZE, bytes(IMAGE_SIZE), bytes([51]) * IMAGE_SIZE]
    labels = [7, 2, 0]
    x, y = populate_minibatch([0, 1], images, labels)
    assert x.shape == (IMAGE_SIZE, 2)
    assert y.shape == (10, 2)
    assert x[5, 0] == 1.0
    assert x[5, 1] == 0.0
    assert y[7, 0] == 1.0
    assert y[2, 1] == 1.0
    columns = y.transpose().to_rows()
    assert [sum(c) for c in columns] == [1.0, 1.0]


def test_populate_minibatch_follows_index_order():
    images = [bytes([255]) * IMAGE_SIZE, bytes(IMAGE_SIZE)]
    x, y = populate_minibatch([1, 0], images, [3, 4])
    assert x[0, 0] == 0.0
    assert x[0, 1] == 1.0
    assert y[4, 0] == 1.0
    assert y[3, 1] == 1.0


def test_populate_minibatch_rejects_bad_label():
    with pytest.raises(ValueError):
        populate_minibatch([0], [bytes(IMAGE_SIZE)], [10])


def test_accuracy_skips_last_batch_but_counts_it():
    nn = _biased_net(3)
    images = _images(6)
    result = accuracy(images, [3] * 6, 2, nn)
    assert result == pytest.approx(66.66666666666667)


def test_accuracy_all_wrong():
    nn = _biased_net(3)
    assert accuracy(_images(6), [4] * 6, 2, nn) == 0.0


def test_accuracy_in_range():
    nn = create_ann(0.05, 2, [IMAGE_SIZE, 3, 10], random.Random(2))
    labels = [i % 10 for i in range(7)]
    assert 0.0 <= accuracy(_images(7), labels, 2, nn) <= 100.0


def test_accuracy_needs_a_full_batch():
    nn = _biased_net(3, minibatch_size=4)
    with pytest.raises(ValueError):
        accuracy(_images(3), [3] * 3, 4, nn)


def test_train_epoch_updates_weights():
    nn = create_ann(0.5, 2, [IMAGE_SIZE, 2, 10], random.Random(4))
    before_hidden = nn.layers[1].weights.to_rows()
    before_out = nn.layers[2].biases.to_rows()
    train_epoch(nn, _images(6), [1, 2, 3, 4, 5, 6], random.Random(5))
    assert nn.layers[1].weights.shape == (2, IMAGE_SIZE)
    assert nn.layers[1].weights.to_rows() != before_hidden
    assert nn.layers[2].biases.to_rows() != before_out


def test_train_epoch_with_too_little_data_changes_nothing():
    nn = create_ann(0.5, 4, [IMAGE_SIZE, 2, 10], random.Random(4))
    before = nn.layers[2].weights.to_rows()
    train_epoch(nn, _images(4), [0, 1, 2, 3], random.Random(5))
    assert nn.layers[2].weights.to_rows() == before


def test_main_runs_one_epoch(tmp_path, capsys):
    images = _images(6)
    labels = [0, 1, 2, 3, 4, 5]
    _write_images(tmp_path / "train-images-idx3-ubyte", images)
    _write_labels(tmp_path / "train-labels-idx1-ubyte", labels)
    _write_images(tmp_path / "t10k-images-idx3-ubyte", images)
    _write_labels(tmp_path / "t10k-labels-idx1-ubyte", labels)
    code = main(
        ["--data-dir", str(tmp_path), "--epochs", "1", "--minibatch-size", "2", "--hidden", "2", "--seed", "1"]
    )
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("starting accuracy ")
    assert lines[1] == "start learning epoch 0"
    assert lines[2].startswith("epoch 0 accuracy ")
    assert len(lines) == 3


def test_main_missing_files(tmp_path, capsys):
    assert main(["--data-dir", str(tmp_path), "--epochs", "0"]) == 1
    assert "train-images-idx3-ubyte" in capsys.readouterr().err