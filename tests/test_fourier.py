import json
import logging
from math import pi
from pathlib import Path

import numpy as np
import pytest

from dimer_dynamics.dimer.fourier import (FourierRotation, fourier_rotate,
                                          get_extrapolated_force)
from dimer_dynamics.dimer.raw import RawDimer
from dimer_dynamics.errors import InvalidTrialAngleError

DATA_DIR = Path(__file__).parent / "files"


def _load_hcn_data() -> dict:
    data = json.loads((DATA_DIR / "hcn_dimer.json").read_text())
    return {k: np.array(v) if isinstance(v, list) else v for k, v in data.items()}


def _quadratic_forces(hessian, x0):
    def forces(x):
        return -hessian @ (x - x0)
    return forces


@pytest.mark.parametrize("c0, c0d, phi1, c1", [
    (-2.0, 0.7, pi / 4, 1.3),
    (0.5, -3.0, 0.3, 0.1),
    (10.0, 1.0, -0.2, 9.5),
])
def test_fit_reproduces_samples(c0, c0d, phi1, c1):
    fourier_rot = FourierRotation.fit(c0=c0, c0d=c0d, phi1=phi1, c1=c1)

    np.testing.assert_allclose(fourier_rot.curvature(0.0), c0, atol=1e-10)
    np.testing.assert_allclose(fourier_rot.curvature(phi1), c1, atol=1e-10)

    eps = 1e-6
    deriv = (fourier_rot.curvature(eps) - fourier_rot.curvature(-eps)) / (2 * eps)
    np.testing.assert_allclose(deriv, c0d, atol=1e-6)


@pytest.mark.parametrize("phi1", [0.0, pi, -pi, 2 * pi])
def test_degenerate_trial_angle(phi1):
    with pytest.raises(InvalidTrialAngleError):
        FourierRotation.fit(c0=1.0, c0d=0.5, phi1=phi1, c1=0.3)


def test_maximum_is_corrected_with_real_forces():
    # a0 = 0, a1 = 1, b1 = 0.5: the atan solution is a curvature maximum
    fourier_rot = FourierRotation.fit(c0=1.0, c0d=1.0, phi1=pi / 4, c1=0.5)
    phi_naive, c_naive = fourier_rot.optimal_rotation()
    assert c_naive > fourier_rot.c0

    phi_min, c_min = fourier_rot.resolve_minimum(extrapolated_force=False)
    np.testing.assert_allclose(phi_min, phi_naive + pi / 2)
    assert c_min <= c_naive
    np.testing.assert_allclose(c_min, -np.sqrt(1.25))


def test_maximum_correction_with_extrapolated_forces_requires_lower_curvature():
    fourier_rot = FourierRotation.fit(c0=1.0, c0d=1.0, phi1=pi / 4, c1=0.5)
    phi_naive, c_naive = fourier_rot.optimal_rotation()

    phi_min, c_min = fourier_rot.resolve_minimum(extrapolated_force=True)
    assert c_min < fourier_rot.c0 and c_min < c_naive
    np.testing.assert_allclose(phi_min, phi_naive + pi / 2)


def test_warning_only_when_maximum_is_corrected_on_extrapolated_forces(caplog):
    maximum_fit = FourierRotation.fit(c0=1.0, c0d=1.0, phi1=pi / 4, c1=0.5)
    minimum_fit = FourierRotation(a0=0.0, a1=-1.0, b1=0.5, c0=-1.0)

    with caplog.at_level(logging.WARNING):
        maximum_fit.resolve_minimum(extrapolated_force=False)
        minimum_fit.resolve_minimum(extrapolated_force=True)
    assert not [r for r in caplog.records if r.levelno == logging.WARNING]

    with caplog.at_level(logging.WARNING):
        maximum_fit.resolve_minimum(extrapolated_force=True)
    assert [r for r in caplog.records if r.levelno == logging.WARNING]


def test_minimum_is_kept():
    # a1 < 0 puts the atan solution on the minimum
    fourier_rot = FourierRotation(a0=0.0, a1=-1.0, b1=0.5, c0=-1.0)
    phi_naive, c_naive = fourier_rot.optimal_rotation()

    for extrapolated in (True, False):
        phi_min, c_min = fourier_rot.resolve_minimum(extrapolated_force=extrapolated)
        assert phi_min == phi_naive
        assert c_min == c_naive
        np.testing.assert_allclose(c_min, -np.sqrt(1.25))


def test_hcn_trial_rotation():
    data = _load_hcn_data()
    raw_dimer = RawDimer(r0=data["r0"], f0=data["f0"], r1=data["r1"], f1=data["f1"])
    theta = raw_dimer.extrapolate().rotational_direction()

    fourier_state = fourier_rotate(
        raw_dimer,
        r1_prime=data["r1_trial"],
        f1_prime=data["f1_trial"],
        phi1=data["phi1"],
        theta=theta,
    )

    np.testing.assert_allclose(fourier_state.phi_min, 0.053786278813014274, atol=1e-6)
    np.testing.assert_allclose(fourier_state.curvature_min, -28.65807149654434, atol=1e-6)
    np.testing.assert_allclose(np.linalg.norm(fourier_state.r1_min - raw_dimer.r0), raw_dimer.dr)
    # trial rotation does not touch the input dimer
    np.testing.assert_array_equal(raw_dimer.r1, data["r1"])


def test_extrapolated_force_is_exact_for_quadratic_surface():
    hessian = np.array([[-1.0, 0.3, 0.0], [0.3, 2.0, 0.4], [0.0, 0.4, 3.0]])
    forces = _quadratic_forces(hessian, x0=np.array([0.2, -0.1, 0.05]))

    r0 = np.array([0.5, 0.4, -0.3])
    dr = 0.01
    n = np.array([1.0, 1.0, 0.0]) / np.sqrt(2)
    theta = np.array([1.0, -1.0, 0.0]) / np.sqrt(2)
    phi1 = pi / 4
    phi_min = 0.3

    f0 = forces(r0)
    f1 = forces(r0 + dr * n)
    f1_prime = forces(r0 + dr * (np.cos(phi1) * n + np.sin(phi1) * theta))
    expected = forces(r0 + dr * (np.cos(phi_min) * n + np.sin(phi_min) * theta))

    f1_min = get_extrapolated_force(phi1=phi1, phi_min=phi_min, f0=f0, f1=f1, f1_prime=f1_prime)
    np.testing.assert_allclose(f1_min, expected, atol=1e-10)


def test_fourier_rotation_finds_exact_minimum_on_quadratic_surface():
    hessian = np.diag([-1.0, 2.0])
    forces = _quadratic_forces(hessian, x0=np.zeros(2))
    r0 = np.array([0.3, -0.2])
    dr = 1e-3
    n = np.array([1.0, 1.0]) / np.sqrt(2)
    raw_dimer = RawDimer(r0=r0, f0=forces(r0), r1=r0 + dr * n, f1=forces(r0 + dr * n))
    theta = raw_dimer.extrapolate().rotational_direction()

    phi1 = pi / 4
    r1_prime = raw_dimer.get_endpoint1_after_rotation(n, theta, phi1)
    fourier_state = fourier_rotate(raw_dimer, r1_prime, forces(r1_prime), phi1, theta)

    np.testing.assert_allclose(fourier_state.curvature_min, -1.0, atol=1e-8)
    axis = (fourier_state.r1_min - r0) / dr
    np.testing.assert_allclose(abs(axis[0]), 1.0, atol=1e-8)
    np.testing.assert_allclose(fourier_state.f1_min, forces(fourier_state.r1_min), atol=1e-8)
