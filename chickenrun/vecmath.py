"""Small vector, quaternion and matrix helpers for scene transforms.

Quaternions are ``(w, x, y, z)`` arrays. Affine matrices are numpy arrays in
row-major form: a "4x3" transform is a ``(3, 4)`` array whose last column is
the translation.
"""

from __future__ import annotations

import math

import numpy as np


def _array(values, length: int, what: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.shape != (length,):
        raise ValueError(f"expected a {what} of {length} components, got shape {arr.shape}")
    return arr


def normalize(v) -> np.ndarray:
    """Return ``v`` scaled to unit length; a zero vector raises ``ValueError``."""
    arr = np.asarray(v, dtype=float)
    length = float(np.linalg.norm(arr))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return arr / length


def quat_to_mat3(q) -> np.ndarray:
    """Return the 3x3 rotation matrix of a unit quaternion ``(w, x, y, z)``."""
    w, x, y, z = _array(q, 4, "quaternion")
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy)],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx)],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy)],
        ]
    )


def quat_inverse(q) -> np.ndarray:
    """Return the multiplicative inverse of quaternion ``q``."""
    arr = _array(q, 4, "quaternion")
    norm_sq = float(arr @ arr)
    if norm_sq == 0.0:
        raise ValueError("cannot invert a zero quaternion")
    return np.array([arr[0], -arr[1], -arr[2], -arr[3]]) / norm_sq


def quat_multiply(a, b) -> np.ndarray:
    """Return the Hamilton product ``a * b``."""
    aw, ax, ay, az = _array(a, 4, "quaternion")
    bw, bx, by, bz = _array(b, 4, "quaternion")
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ]
    )


def quat_rotate(q, v) -> np.ndarray:
    """Rotate vector ``v`` by unit quaternion ``q``."""
    arr = _array(q, 4, "quaternion")
    vec = _array(v, 3, "vector")
    w, u = arr[0], arr[1:]
    uv = np.cross(u, vec)
    uuv = np.cross(u, uv)
    return vec + 2.0 * (w * uv + uuv)


def angle_axis(angle: float, axis) -> np.ndarray:
    """Return the quaternion rotating by ``angle`` radians about ``axis``."""
    ax = _array(axis, 3, "axis")
    half = 0.5 * angle
    s = math.sin(half)
    return np.array([math.cos(half), ax[0] * s, ax[1] * s, ax[2] * s])


def infinite_perspective(fovy: float, aspect: float, near: float) -> np.ndarray:
    """Return a 4x4 perspective projection with the far plane at infinity."""
    extent = math.tan(fovy / 2.0) * near
    left, right = -extent * aspect, extent * aspect
    bottom, top = -extent, extent
    result = np.zeros((4, 4))
    result[0, 0] = (2.0 * near) / (right - left)
    result[1, 1] = (2.0 * near) / (top - bottom)
    result[2, 2] = -1.0
    result[3, 2] = -1.0
    result[2, 3] = -2.0 * near
    return result


def pad_to_mat4(m) -> np.ndarray:
    """Extend a ``(3, 4)`` affine matrix to ``(4, 4)`` with a ``(0, 0, 0, 1)`` row."""
    arr = np.asarray(m, dtype=float)
    if arr.shape != (3, 4):
        raise ValueError(f"expected a (3, 4) matrix, got shape {arr.shape}")
    return np.vstack([arr, [0.0, 0.0, 0.0, 1.0]])