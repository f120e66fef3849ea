"""Dense and sparse numeric kernels, activations, losses and metrics on float32 arrays."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from graphkit.rng import Context

FLOAT = np.float32
_LOG_FLOOR = 1e-10


def _vec(x) -> np.ndarray:
    return np.asarray(x, dtype=FLOAT)


def init_glorot(dim_x: int, dim_y: int, seed: int = 0) -> np.ndarray:
    """Glorot-uniform weights of shape (dim_x, dim_y) in [-r, r], r = sqrt(6 / (dim_x + dim_y))."""
    if dim_x + dim_y <= 0:
        raise ValueError("dimensions must not both be zero")
    init_range = math.sqrt(6.0 / (dim_x + dim_y))
    rng = np.random.default_rng(seed)
    return rng.uniform(-init_range, init_range, size=(dim_x, dim_y)).astype(FLOAT)


def binary_search(colidx: Sequence[int], key: int, begin: int, end: int) -> int:
    """Index of ``key`` in the sorted slice ``colidx[begin:end]``, or -1 if absent."""
    if begin >= end:
        raise ValueError("search range must be non-empty")
    lo, hi = begin, end - 1
    while hi >= lo:
        mid = lo + (hi - lo) // 2
        value = colidx[mid]
        if value == key:
            return mid
        if value < key:
            lo = mid + 1
        else:
            hi = mid - 1
    return -1


def symmetric_csr_transpose(indptr: Sequence[int], indices: Sequence[int], values) -> np.ndarray:
    """Values of the transpose of a structurally symmetric CSR matrix, in the same layout."""
    values = _vec(values)
    out = np.zeros(len(indices), dtype=FLOAT)
    for src in range(len(indptr) - 1):
        for e in range(indptr[src], indptr[src + 1]):
            dst = indices[e]
            if indptr[dst] >= indptr[dst + 1]:
                raise ValueError(f"matrix is not symmetric: row {dst} is empty")
            idx = binary_search(indices, src, indptr[dst], indptr[dst + 1])
            if idx == -1:
                raise ValueError(f"matrix is not symmetric: ({dst}, {src}) missing")
            out[idx] = values[e]
    return out


def _selected_rows(begin: int, end: int, masks) -> np.ndarray:
    rows = np.arange(begin, end)
    if masks is None:
        return rows
    masks = np.asarray(masks)
    return rows[masks[begin:end] == 1]


def argmax(arr) -> int:
    """Index of the first strictly greatest element; -1 if none exceeds -inf."""
    max_idx = -1
    best = -math.inf
    for i, value in enumerate(np.asarray(arr, dtype=FLOAT).tolist()):
        if value > best:
            best = value
            max_idx = i
    return max_idx


def masked_accuracy_single(begin: int, end: int, num_classes: int, masks, preds, ground_truth) -> float:
    """Fraction of selected rows whose arg-max prediction equals the label (nan if none)."""
    preds = _vec(preds).reshape(-1, num_classes)
    ground_truth = np.asarray(ground_truth)
    rows = _selected_rows(begin, end, masks)
    if len(rows) == 0:
        return float("nan")
    correct = sum(1 for i in rows if argmax(preds[i]) == ground_truth[i])
    return correct / len(rows)


def masked_f1_score(begin: int, end: int, num_classes: int, masks, pred, ground_truth) -> float:
    """Micro-averaged F1 of multi-label predictions thresholded at 0.5."""
    pred = _vec(pred).reshape(-1, num_classes)
    truth = np.asarray(ground_truth).reshape(-1, num_classes)
    rows = _selected_rows(begin, end, masks)
    p = pred[rows] > 0.5
    t = truth[rows]
    tp = int(np.sum((t == 1) & p))
    fp = int(np.sum((t == 0) & p))
    fn = int(np.sum((t == 1) & ~p))
    precision = tp / (tp + fp) if tp + fp > 0 else 0.0
    recall = tp / (tp + fn) if tp + fn > 0 else 0.0
    if precision + recall <= 0:
        return 0.0
    return 2.0 * precision * recall / (precision + recall)


def dot(x, y) -> float:
    x, y = _vec(x), _vec(y)
    if x.shape != y.shape:
        raise ValueError("vectors must have the same length")
    return float(np.dot(x, y))


def matmul(a, b, trans_a: bool = False, trans_b: bool = False) -> np.ndarray:
    """Dense product op(a) @ op(b), where op optionally transposes."""
    a, b = _vec(a), _vec(b)
    if trans_a:
        a = a.T
    if trans_b:
        b = b.T
    return a @ b


def spmm(indptr: Sequence[int], indices: Sequence[int], values, b) -> np.ndarray:
    """Product of a CSR matrix with a dense matrix ``b``."""
    values, b = _vec(values), _vec(b)
    rows = len(indptr) - 1
    out = np.zeros((rows, b.shape[1]), dtype=FLOAT)
    for i in range(rows):
        for e in range(indptr[i], indptr[i + 1]):
            out[i] += values[e] * b[indices[e]]
    return out


def bias_mv(x, b) -> np.ndarray:
    """Add bias vector ``b`` to every row of ``x``."""
    x, b = _vec(x), _vec(b)
    if x.ndim != 2 or x.shape[1] != b.shape[0]:
        raise ValueError("bias length must match the row length")
    return x + b


def reduce_sum(x) -> np.ndarray:
    """Column sums of a 2-D array."""
    return _vec(x).sum(axis=0, dtype=FLOAT)


def relu(x) -> np.ndarray:
    return np.maximum(_vec(x), FLOAT(0))


def d_relu(grad, data) -> np.ndarray:
    """Pass the gradient where the original input was positive."""
    grad, data = _vec(grad), _vec(data)
    return np.where(data > 0, grad, FLOAT(0))


def leaky_relu(epsilon: float, x) -> np.ndarray:
    x = _vec(x)
    return np.where(x > 0, x, FLOAT(epsilon) * x)


def d_leaky_relu(epsilon: float, grad, data) -> np.ndarray:
    grad, data = _vec(grad), _vec(data)
    return grad * np.where(data > 0, FLOAT(1), FLOAT(epsilon))


def softmax(x) -> np.ndarray:
    x = _vec(x)
    if x.size == 0:
        raise ValueError("softmax of an empty vector")
    e = np.exp(x - x.max())
    return e / e.sum()


def d_softmax(p, dp) -> np.ndarray:
    """Gradient through softmax: dy = J^T dp, with J the softmax Jacobian at ``p``."""
    p, dp = _vec(p), _vec(dp)
    return p * (dp - FLOAT(np.dot(p, dp)))


def sigmoid(x) -> np.ndarray:
    x = _vec(x)
    return FLOAT(1) / (FLOAT(1) + np.exp(-x))


def d_sigmoid(p, dp) -> np.ndarray:
    p, dp = _vec(p), _vec(dp)
    return dp * p * (FLOAT(1) - p)


def cross_entropy(y, p) -> float:
    """Cross-entropy of predicted probabilities ``p`` against targets ``y``."""
    y, p = _vec(y), _vec(p)
    nz = y != 0
    safe_p = np.where(p[nz] == 0, FLOAT(_LOG_FLOOR), p[nz])
    return float(-np.sum(y[nz] * np.log(safe_p)))


def d_cross_entropy(y, p) -> np.ndarray:
    y, p = _vec(y), _vec(p)
    return -y / (p + FLOAT(_LOG_FLOOR))


def sigmoid_cross_entropy(y, p) -> float:
    """Numerically stable sigmoid cross-entropy of logits ``p`` against labels ``y``."""
    y, p = _vec(y), _vec(p)
    pos = (p >= 0).astype(FLOAT)
    terms = p * (y - pos) - np.log(FLOAT(1) + np.exp(p - FLOAT(2) * p * pos))
    return float(-np.sum(terms))


def dropout(x, rate: float, scale: float, rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Keep each element with probability 1 - rate; return (scaled output, 0/1 mask)."""
    if not 0.0 <= rate <= 1.0:
        raise ValueError("dropout rate must lie in [0, 1]")
    x = _vec(x)
    if rng is None:
        rng = Context.get().generator()
    masks = (rng.random(x.shape) < 1.0 - rate).astype(np.uint8)
    return x * masks.astype(FLOAT) * FLOAT(scale), masks


def d_dropout(grad, masks, scale: float) -> np.ndarray:
    grad = _vec(grad)
    return grad * np.asarray(masks).astype(FLOAT) * FLOAT(scale)


def scaled_vadd(a: float, x, y) -> np.ndarray:
    """Return a * x + y."""
    return FLOAT(a) * _vec(x) + _vec(y)


def scale(a: float, x) -> np.ndarray:
    return FLOAT(a) * _vec(x)