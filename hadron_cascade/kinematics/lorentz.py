"""Four-vector helpers.

Four-vectors are numpy arrays ordered (E, px, py, pz). Units: MeV, c = 1.
"""

import numpy as np


def invariant_mass_squared(p4: np.ndarray) -> float:
    return float(p4[0] * p4[0] - np.dot(p4[1:], p4[1:]))


def invariant_mass(p4: np.ndarray) -> float:
    """Invariant mass, zero for space-like vectors."""
    return float(np.sqrt(max(invariant_mass_squared(p4), 0.0)))


def boost_vector(p4: np.ndarray) -> np.ndarray:
    """Velocity (beta) of the frame in which ``p4`` is at rest."""
    if p4[0] <= 0:
        raise ValueError(f"boost_vector needs positive energy, got {p4[0]}")
    return np.asarray(p4[1:], dtype=np.float64) / p4[0]


def boost(p4: np.ndarray, beta: np.ndarray) -> np.ndarray:
    """Lorentz boost of ``p4`` by velocity ``beta``.

    Boosting by ``-boost_vector(P)`` takes P to its rest frame; boosting by
    ``+boost_vector(P)`` takes rest-frame vectors back to the frame of P.
    """
    beta = np.asarray(beta, dtype=np.float64)
    b2 = float(np.dot(beta, beta))
    if b2 == 0.0:
        return np.array(p4, dtype=np.float64)
    if b2 >= 1.0:
        raise ValueError(f"|beta| must be < 1, got {np.sqrt(b2)}")
    gamma = 1.0 / np.sqrt(1.0 - b2)
    bp = float(np.dot(beta, p4[1:]))
    gamma2 = (gamma - 1.0) / b2
    energy = gamma * (p4[0] + bp)
    momentum = p4[1:] + gamma2 * bp * beta + gamma * beta * p4[0]
    return np.concatenate(([energy], momentum))


def rotate_uz(axis: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate ``v`` from a frame whose z axis is ``axis`` into the lab frame."""
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm == 0:
        return np.array(v, dtype=np.float64)
    u1, u2, u3 = axis / norm
    px, py, pz = v
    up = u1 * u1 + u2 * u2
    if up > 0:
        up = np.sqrt(up)
        return np.array([
            (u1 * u3 * px - u2 * py) / up + u1 * pz,
            (u2 * u3 * px + u1 * py) / up + u2 * pz,
            -up * px + u3 * pz,
        ])
    if u3 < 0:
        return np.array([-px, py, -pz])
    return np.array([px, py, pz], dtype=np.float64)


def direction_from_angles(cos_theta: float, phi: float) -> np.ndarray:
    """Unit vector with polar cosine ``cos_theta`` and azimuth ``phi``."""
    cos_theta = min(max(cos_theta, -1.0), 1.0)
    sin_theta = np.sqrt(1.0 - cos_theta * cos_theta)
    return np.array([sin_theta * np.cos(phi), sin_theta * np.sin(phi), cos_theta])


def isotropic_direction(rng) -> np.ndarray:
    """Isotropic unit vector from two uniform draws (cos theta first, then phi)."""
    cos_theta = 2.0 * rng.rndm() - 1.0
    phi = 2.0 * np.pi * rng.rndm()
    return direction_from_angles(cos_theta, phi)


def two_body_momentum(parent_mass: float, m1: float, m2: float) -> float:
    """Daughter momentum of a two-body decay at rest, zero below threshold."""
    term = (parent_mass * parent_mass - (m1 + m2) ** 2) * (parent_mass * parent_mass - (m1 - m2) ** 2)
    if term <= 0 or parent_mass <= 0:
        return 0.0
    return float(np.sqrt(term) / (2.0 * parent_mass))
