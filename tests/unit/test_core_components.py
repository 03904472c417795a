import numpy as np
import pytest

from dualnet.core import linalg
from dualnet.core.activations import sigmoid, sigmoid_deriv
from dualnet.core.network import apply_gradients, backward, forward, init_network, predict
from dualnet.core.types import PARAM_SHAPES, NeuralNet, ShapeError
from dualnet.training.losses import mse


def _loss_at(net, x, target):
    cache = forward(net, x)
    loss, _ = mse(cache.output_act, np.array([target]))
    return loss


def test_linalg_rejects_mismatched_shapes():
    with pytest.raises(ShapeError):
        linalg.add(np.ones(3), np.ones(4))
    with pytest.raises(ShapeError):
        linalg.sub(np.ones((4, 2)), np.ones((2, 4)))
    with pytest.raises(ShapeError):
        linalg.hadamard(np.ones((2, 1)), np.ones(2))
    with pytest.raises(ShapeError):
        linalg.matvec(np.ones((4, 2)), np.ones(3))
    with pytest.raises(ShapeError):
        linalg.matmul(np.ones((2, 3)), np.ones((2, 3)))
    with pytest.raises(ShapeError):
        linalg.outer(np.ones((2, 2)), np.ones(2))
    with pytest.raises(ShapeError):
        linalg.transpose(np.ones(3))


def test_linalg_products():
    m = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
    v = np.array([1.0, -1.0])
    assert np.allclose(linalg.matvec(m, v), [-1.0, -1.0, -1.0])
    assert linalg.matmul(m, linalg.transpose(m)).shape == (3, 3)
    assert np.allclose(linalg.outer(np.array([1.0, 2.0]), np.array([3.0, 4.0, 5.0])), [[3, 4, 5], [6, 8, 10]])
    assert np.allclose(linalg.sub(v, v), 0.0)


@pytest.mark.parametrize("x", [-30.0, -2.0, -0.5, 0.0, 0.5, 2.0, 30.0])
def test_sigmoid_derivative_identity(x):
    arr = np.array([x])
    s = sigmoid(arr)
    assert np.allclose(sigmoid_deriv(arr), s * (1.0 - s))
    h = 1e-6
    numeric = (sigmoid(arr + h) - sigmoid(arr - h)) / (2 * h)
    assert np.allclose(sigmoid_deriv(arr), numeric, atol=1e-8)


def test_sigmoid_midpoint_and_range():
    out = sigmoid(np.array([-5.0, 0.0, 5.0]))
    assert out[1] == pytest.approx(0.5)
    assert np.all((out > 0.0) & (out < 1.0))


def test_init_network_shapes_and_range():
    net = init_network(0, scale=0.5)
    for name, value in net.state_dict().items():
        assert value.shape == PARAM_SHAPES[name]
        assert np.all(np.abs(value) <= 0.5)
        assert np.any(value != 0.0)
    assert net.parameter_count() == 4 * 2 + 4 + 4 + 1


def test_init_network_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        init_network(0, scale=0.0)


def test_neural_net_is_read_only():
    net = init_network(1)
    with pytest.raises(ValueError):
        net.w1[0, 0] = 5.0
    with pytest.raises(ShapeError):
        NeuralNet(w1=np.zeros((2, 2)), b1=np.zeros(4), w2=np.zeros((1, 4)), b2=np.zeros(1))


def test_state_dict_round_trip():
    net = init_network(3)
    clone = NeuralNet.from_state_dict(net.state_dict())
    for name, value in net.state_dict().items():
        assert np.array_equal(value, clone.state_dict()[name])
    with pytest.raises(KeyError):
        NeuralNet.from_state_dict({"W1": net.w1})


@pytest.mark.parametrize("x", [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0), (-7.5, 12.0)])
def test_forward_output_is_single_probability(x):
    cache = forward(init_network(5), np.array(x))
    assert cache.output_act.shape == (1,)
    assert 0.0 < cache.prediction < 1.0
    assert cache.hidden_pre.shape == (4,)
    assert cache.hidden_act.shape == (4,)


def test_forward_rejects_wrong_input_size():
    with pytest.raises(ShapeError):
        forward(init_network(5), np.array([1.0, 0.0, 1.0]))


def test_forward_is_pure():
    net = init_network(8)
    x = np.array([1.0, 0.0])
    first = forward(net, x)
    second = forward(net, x)
    assert np.array_equal(first.output_act, second.output_act)


def test_backward_gradient_shapes_match_parameters():
    net = init_network(11)
    x = np.array([0.0, 1.0])
    cache = forward(net, x)
    _, grad = mse(cache.output_act, np.array([1.0]))
    grads = backward(net, cache, x, grad)
    params = net.state_dict()
    for name, value in grads.as_dict().items():
        assert value.shape == params[name].shape


def test_backward_matches_finite_differences():
    net = init_network(21)
    x = np.array([1.0, 0.0])
    target = 1.0
    cache = forward(net, x)
    _, grad = mse(cache.output_act, np.array([target]))
    analytic = backward(net, cache, x, grad).as_dict()

    eps = 1e-6
    state = net.state_dict()
    for name, value in state.items():
        numeric = np.zeros_like(value)
        for idx in np.ndindex(value.shape):
            plus = {k: v.copy() for k, v in state.items()}
            minus = {k: v.copy() for k, v in state.items()}
            plus[name][idx] += eps
            minus[name][idx] -= eps
            numeric[idx] = (
                _loss_at(NeuralNet.from_state_dict(plus), x, target)
                - _loss_at(NeuralNet.from_state_dict(minus), x, target)
            ) / (2 * eps)
        assert np.allclose(analytic[name], numeric, atol=1e-7), name


def test_backward_rejects_mis_shaped_loss_gradient():
    net = init_network(2)
    x = np.array([1.0, 1.0])
    cache = forward(net, x)
    with pytest.raises(ShapeError):
        backward(net, cache, x, np.array([0.1, 0.2]))


def test_apply_gradients_returns_new_network():
    net = init_network(4)
    x = np.array([1.0, 1.0])
    cache = forward(net, x)
    _, grad = mse(cache.output_act, np.array([0.0]))
    grads = backward(net, cache, x, grad)
    before = net.state_dict()
    updated = apply_gradients(net, grads, lr=0.1)
    assert updated is not net
    for name, value in net.state_dict().items():
        assert np.array_equal(value, before[name])
    assert np.allclose(updated.w1, net.w1 - 0.1 * grads.dw1)
    assert np.allclose(updated.b2, net.b2 - 0.1 * grads.db2)
    assert _loss_at(updated, x, 0.0) < _loss_at(net, x, 0.0)


def test_mse_value_and_gradient():
    loss, grad = mse(np.array([0.75]), np.array([1.0]))
    assert loss == pytest.approx(0.0625)
    assert np.allclose(grad, [-0.5])
    with pytest.raises(ShapeError):
        mse(np.array([0.5, 0.5]), np.array([1.0]))


def test_predict_rows():
    net = init_network(9)
    inputs = np.array([[0.0, 0.0], [1.0, 1.0]])
    preds = predict(net, inputs)
    assert preds.shape == (2,)
    assert preds[1] == pytest.approx(forward(net, inputs[1]).prediction)
    with pytest.raises(ShapeError):
        predict(net, np.array([0.0, 1.0]))
