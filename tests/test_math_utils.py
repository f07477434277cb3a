"""
Unit tests for the math_utils module.

These tests verify the closed-form ACN/SN3D coefficient table against a
generic Legendre evaluation and check the properties every SN3D harmonic
must satisfy on the unit sphere.
"""

import pytest
import numpy as np
import math
from hoamic.codec.math_utils import (
    ACN_TABLE, SN3D_ELEVATION_TERMS, factorial, sn3d_normalization,
    get_coefficients, get_coefficient, coefficient_by_label, coefficient_table,
    real_spherical_harmonic, spherical_harmonic_matrix, directional_energy
)
from hoamic.codec.exceptions import ConfigurationError, MathError, ValidationError


class TestFactorials:
    """Tests for the factorial helper."""

    def test_factorial_basic(self):
        """Test basic factorial calculations."""
        assert factorial(0) == 1
        assert factorial(1) == 1
        assert factorial(5) == 120
        assert factorial(14) == 87178291200

    def test_factorial_negative(self):
        """Test factorial with negative input raises error."""
        with pytest.raises(MathError.DomainError):
            factorial(-1)

    def test_sn3d_normalization(self):
        """Zonal harmonics have unit normalization, first order sectoral too."""
        assert sn3d_normalization(3, 0) == 1.0
        assert abs(sn3d_normalization(1, 1) - 1.0) < 1e-12
        assert abs(sn3d_normalization(2, 2) - math.sqrt(1 / 12)) < 1e-12
        with pytest.raises(MathError.DomainError):
            sn3d_normalization(2, 3)


class TestCoefficientTable:
    """Tests for the layout of the ACN table."""

    def test_table_has_all_degrees(self):
        """Every (l, |m|) up to 7th order has exactly one formula."""
        expected = {(l, m) for l in range(8) for m in range(l + 1)}
        assert set(SN3D_ELEVATION_TERMS) == expected

    def test_acn_ordering(self):
        """Rows are in ACN order with n = l² + l + m."""
        assert len(ACN_TABLE) == 64
        for n, (acn, l, m) in enumerate(ACN_TABLE):
            assert acn == n
            assert l == math.isqrt(n)
            assert m == n - l * l - l

    @pytest.mark.parametrize('order, n_channels', [(1, 4), (2, 9), (3, 16), (4, 25),
                                                   (5, 36), (6, 49), (7, 64)])
    def test_table_slices(self, order, n_channels):
        """Each order uses a leading slice of the full table."""
        rows = coefficient_table(order)
        assert len(rows) == n_channels
        assert rows == ACN_TABLE[:n_channels]

    @pytest.mark.parametrize('order', [0, 8, -1])
    def test_table_invalid_order(self, order):
        """Orders outside 1..7 are rejected."""
        with pytest.raises(ConfigurationError):
            coefficient_table(order)


class TestClosedFormCoefficients:
    """Tests for the closed-form coefficient engine."""

    def test_matches_reference(self, direction_grid):
        """All 64 closed-form entries agree with the Legendre-based reference."""
        azimuths, elevations = direction_grid
        Y = get_coefficients(azimuths, elevations)
        Y_ref = spherical_harmonic_matrix(7, azimuths, elevations).T
        np.testing.assert_allclose(Y, Y_ref, atol=1e-10)

    def test_single_direction_matches_reference(self):
        """Scalar evaluation agrees with the reference entry by entry."""
        azimuth, elevation = 0.7, -0.4
        Y = get_coefficients(azimuth, elevation)
        assert Y.shape == (64,)
        for acn, l, m in ACN_TABLE:
            assert abs(Y[acn] - real_spherical_harmonic(l, m, azimuth, elevation)) < 1e-10

    def test_sixth_order_second_suborder(self):
        """The degree-6, |m|=2 entries use the full quartic in sin(elevation)."""
        azimuth, elevation = 0.7, 0.3
        s, c = math.sin(elevation), math.cos(elevation)
        elevation_term = math.sqrt(210) / 32 * c**2 * (33 * s**4 - 18 * s**2 + 1)

        Y = get_coefficients(azimuth, elevation)
        assert abs(Y[40] - elevation_term * math.sin(2 * azimuth)) < 1e-12
        assert abs(Y[44] - elevation_term * math.cos(2 * azimuth)) < 1e-12

    def test_normalization_bound(self, direction_grid):
        """SN3D harmonics never exceed unit magnitude on the sphere."""
        azimuths, elevations = direction_grid
        Y = get_coefficients(azimuths, elevations)
        assert np.all(np.abs(Y) <= 1.0 + 1e-12)

    def test_omni_is_unity(self, direction_grid):
        """W is exactly 1 for every direction."""
        azimuths, elevations = direction_grid
        Y = get_coefficients(azimuths, elevations)
        assert np.all(Y[0] == 1.0)

    def test_front(self):
        """Straight front: W=1, Y=0, Z=0, X=1."""
        Y = get_coefficients(0.0, 0.0)
        np.testing.assert_allclose(Y[:4], [1.0, 0.0, 0.0, 1.0], atol=1e-12)

    def test_left(self):
        """Left (azimuth π/2): W=1, Y=1, Z=0, X=0."""
        Y = get_coefficients(math.pi / 2, 0.0)
        np.testing.assert_allclose(Y[:4], [1.0, 1.0, 0.0, 0.0], atol=1e-12)

    def test_zenith(self):
        """At the zenith only the zonal (m=0) harmonics are non-zero, all equal to 1."""
        Y = get_coefficients(0.3, math.pi / 2)
        for acn, l, m in ACN_TABLE:
            expected = 1.0 if m == 0 else 0.0
            assert abs(Y[acn] - expected) < 1e-12

    def test_elevation_parity(self, direction_grid):
        """Mirroring the elevation flips the sign of harmonics with odd l + |m|."""
        azimuths, elevations = direction_grid
        upper = get_coefficients(azimuths, elevations)
        lower = get_coefficients(azimuths, -elevations)
        for acn, l, m in ACN_TABLE:
            parity = (-1) ** (l + abs(m))
            np.testing.assert_allclose(lower[acn], parity * upper[acn], atol=1e-12)

    def test_z_is_odd_and_w_is_even(self):
        """Z changes sign with elevation, W does not."""
        up = get_coefficients(0.5, 0.6)
        down = get_coefficients(0.5, -0.6)
        assert abs(up[2] + down[2]) < 1e-12
        assert up[0] == down[0] == 1.0

    def test_full_turn_periodicity(self, direction_grid):
        """All channels repeat after a full azimuth turn."""
        azimuths, elevations = direction_grid
        np.testing.assert_allclose(get_coefficients(azimuths + 2 * np.pi, elevations),
                                   get_coefficients(azimuths, elevations), atol=1e-12)

    def test_suborder_periodicity(self):
        """A harmonic of suborder m repeats with period 2π/|m| in azimuth."""
        azimuths = np.linspace(-np.pi, np.pi, 17)
        elevation = 0.25
        Y = get_coefficients(azimuths, elevation)
        for acn, l, m in ACN_TABLE:
            if m == 0:
                np.testing.assert_allclose(Y[acn], Y[acn][0], atol=1e-12)
                continue
            shifted = get_coefficient(acn, azimuths + 2 * np.pi / abs(m), elevation)
            np.testing.assert_allclose(shifted, Y[acn], atol=1e-12)

    def test_degree_energy(self, direction_grid):
        """The squares of each degree's 2l+1 harmonics sum to 1."""
        azimuths, elevations = direction_grid
        Y = get_coefficients(azimuths, elevations)
        for l in range(8):
            energy = np.sum(Y[l * l:(l + 1) ** 2] ** 2, axis=0)
            np.testing.assert_allclose(energy, 1.0, atol=1e-12)

    @pytest.mark.parametrize('azimuth, elevation', [(0.0, 0.0), (math.pi / 2, 0.0), (0.0, math.pi / 2),
                                                    (-2.0, 0.8)])
    def test_directional_energy(self, azimuth, elevation):
        """Directional energy at order N equals N for any direction."""
        Y = get_coefficients(azimuth, elevation)
        for order in range(1, 8):
            assert abs(directional_energy(Y, order) - order) < 1e-12

    def test_array_shapes(self):
        """Angle arrays broadcast and appear after the channel axis."""
        assert get_coefficients(np.zeros(5), 0.0).shape == (64, 5)
        assert get_coefficients(np.zeros((2, 3)), np.zeros((2, 3))).shape == (64, 2, 3)

    def test_nan_propagates(self):
        """Non-finite angles are not rejected, they give NaN."""
        Y = get_coefficients(np.nan, 0.0)
        assert np.isnan(Y[1])
        assert np.isnan(Y[3])
        assert np.isnan(get_coefficients(0.0, np.inf)[2])

    def test_deterministic(self):
        """Repeated evaluation gives identical results."""
        np.testing.assert_array_equal(get_coefficients(1.1, -0.2), get_coefficients(1.1, -0.2))


class TestSingleCoefficient:
    """Tests for evaluating one entry at a time."""

    def test_matches_vector(self):
        """get_coefficient agrees with the full vector."""
        Y = get_coefficients(-1.3, 0.45)
        for acn in range(64):
            assert get_coefficient(acn, -1.3, 0.45) == pytest.approx(Y[acn], abs=1e-15)

    def test_by_label(self):
        """Channel aliases resolve to the ACN entries."""
        assert coefficient_by_label('W', 0.4, 0.2) == pytest.approx(1.0)
        assert coefficient_by_label('X', 0.0, 0.0) == pytest.approx(1.0)
        assert coefficient_by_label('Y', math.pi / 2, 0.0) == pytest.approx(1.0)
        assert coefficient_by_label('ACN63', 0.4, 0.2) == pytest.approx(get_coefficient(63, 0.4, 0.2))

    @pytest.mark.parametrize('acn', [-1, 64])
    def test_invalid_channel(self, acn):
        """Channel numbers outside 0..63 are rejected."""
        with pytest.raises(ValidationError):
            get_coefficient(acn, 0.0, 0.0)


class TestReference:
    """Tests for the generic reference evaluator."""

    def test_reference_first_order(self):
        """First-order reference values follow the ISO frame."""
        assert real_spherical_harmonic(1, 1, 0.0, 0.0) == pytest.approx(1.0)
        assert real_spherical_harmonic(1, -1, math.pi / 2, 0.0) == pytest.approx(1.0)
        assert real_spherical_harmonic(1, 0, 0.0, math.pi / 2) == pytest.approx(1.0)

    def test_reference_invalid(self):
        """Invalid harmonic indices are rejected."""
        with pytest.raises(MathError.DomainError):
            real_spherical_harmonic(-1, 0, 0.0, 0.0)
        with pytest.raises(MathError.DomainError):
            real_spherical_harmonic(2, 3, 0.0, 0.0)

    def test_matrix_shape(self):
        """The reference matrix has one row per direction and ACN columns."""
        Y = spherical_harmonic_matrix(2, np.array([0.0, 1.0, 2.0]), np.array([0.0, 0.1, 0.2]))
        assert Y.shape == (3, 9)
