import numpy as np
import pytest

from pgmfilter.filters import (
    Filter,
    Variant,
    apply_filter,
    clamp,
    convolve,
    smooth_zero_padded,
    sobel_magnitude,
)

INNER = (slice(1, -1), slice(1, -1))


@pytest.fixture
def random_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(12, 15), dtype=np.uint8)


def test_clamp_scalars():
    assert clamp(-5) == 0
    assert clamp(300) == 255
    assert clamp(17) == 17


def test_clamp_array():
    assert clamp(np.array([-1, 0, 128, 256])).tolist() == [0, 0, 128, 255]


@pytest.mark.parametrize("variant", list(Variant))
@pytest.mark.parametrize("name", list(Filter))
def test_output_keeps_shape(random_image, name, variant):
    out = apply_filter(random_image, name, variant)
    assert out.shape == random_image.shape
    assert out.dtype == np.uint8


@pytest.mark.parametrize("variant", [Variant.SERIAL, Variant.OPENMP])
@pytest.mark.parametrize("name", list(Filter))
def test_border_stays_zero(random_image, name, variant):
    out = apply_filter(random_image, name, variant)
    assert not out[0].any()
    assert not out[-1].any()
    assert not out[:, 0].any()
    assert not out[:, -1].any()


def test_hybrid_filters_top_and_bottom_rows():
    image = np.full((6, 8), 100, dtype=np.uint8)
    out = apply_filter(image, "sharpen", "hybrid")
    assert not out[:, 0].any()
    assert not out[:, -1].any()
    assert out[0, 1:-1].all()
    assert out[-1, 1:-1].all()


@pytest.mark.parametrize("name", list(Filter))
def test_hybrid_matches_serial_inside(random_image, name):
    serial = apply_filter(random_image, name, Variant.SERIAL)
    hybrid = apply_filter(random_image, name, Variant.HYBRID)
    np.testing.assert_array_equal(hybrid[INNER], serial[INNER])


@pytest.mark.parametrize("name", [Filter.SHARPEN, Filter.EDGE, Filter.EMBOSS])
def test_openmp_matches_serial_except_smoothing(random_image, name):
    np.testing.assert_array_equal(
        apply_filter(random_image, name, Variant.OPENMP),
        apply_filter(random_image, name, Variant.SERIAL),
    )


def test_constant_image_responses():
    image = np.full((7, 9), 50, dtype=np.uint8)
    assert (apply_filter(image, "smooth")[INNER] == 50).all()
    assert (apply_filter(image, "sharpen")[INNER] == 50).all()
    assert (apply_filter(image, "edge")[INNER] == 0).all()
    assert (apply_filter(image, "emboss")[INNER] == 50 + 128).all()


def test_emboss_saturates():
    image = np.full((5, 5), 200, dtype=np.uint8)
    assert (apply_filter(image, Filter.EMBOSS)[INNER] == 255).all()


def test_openmp_smoothing_divides_sharpen_response():
    image = np.full((5, 5), 160, dtype=np.uint8)
    out = apply_filter(image, "smooth", "openmp")
    assert (out[INNER] == 160 // 16).all()


def test_openmp_smoothing_wraps_negative_sums():
    image = np.zeros((7, 7), dtype=np.uint8)
    image[3, 3] = 255
    out = apply_filter(image, "smooth", "openmp")
    assert out[2, 3] == 241
    assert out[3, 3] == 79


def test_convolve_identity_kernel(random_image):
    kernel = [[0, 0, 0], [0, 1, 0], [0, 0, 0]]
    out = convolve(random_image, kernel)
    np.testing.assert_array_equal(out[INNER], random_image[INNER])


def test_convolve_divisor_and_offset():
    image = np.full((4, 4), 100, dtype=np.uint8)
    out = convolve(image, np.ones((3, 3), dtype=int), divisor=9, offset=-30)
    assert (out[INNER] == 100 - 30).all()


def test_convolve_clamps_negative():
    image = np.full((4, 4), 100, dtype=np.uint8)
    out = convolve(image, [[0, 0, 0], [0, -1, 0], [0, 0, 0]])
    assert not out.any()


def test_convolve_tiny_image_gives_zeros():
    out = convolve(np.full((2, 2), 9, dtype=np.uint8), [[1, 1, 1]] * 3)
    assert out.tolist() == [[0, 0], [0, 0]]


def test_convolve_rejects_zero_divisor(random_image):
    with pytest.raises(ValueError, match="divisor"):
        convolve(random_image, [[0, 0, 0], [0, 1, 0], [0, 0, 0]], divisor=0)


def test_convolve_rejects_even_kernel(random_image):
    with pytest.raises(ValueError, match="kernel"):
        convolve(random_image, [[1, 1], [1, 1]])


def test_unknown_filter(random_image):
    with pytest.raises(ValueError, match="Unknown filter"):
        apply_filter(random_image, "blur")


def test_unknown_variant(random_image):
    with pytest.raises(ValueError, match="Unknown variant"):
        apply_filter(random_image, "smooth", "cuda")


def test_rejects_out_of_range_pixels():
    with pytest.raises(ValueError):
        apply_filter(np.array([[0, 300], [1, 2]]), "smooth")


def test_rejects_non_2d_image():
    with pytest.raises(ValueError, match="two-dimensional"):
        apply_filter(np.zeros((3, 3, 3), dtype=np.uint8), "edge")


def test_sobel_constant_image_is_zero():
    assert not sobel_magnitude(np.full((6, 6), 77, dtype=np.uint8)).any()


def test_sobel_vertical_step():
    image = np.zeros((6, 8), dtype=np.uint8)
    image[:, 4:] = 255
    out = sobel_magnitude(image)
    assert (out[1:-1, 3] == 255).all()
    assert (out[1:-1, 4] == 255).all()
    assert not out[1:-1, 1].any()
    assert not out[1:-1, 6].any()


def test_sobel_transpose_symmetry(random_image):
    np.testing.assert_array_equal(
        sobel_magnitude(random_image.T), sobel_magnitude(random_image).T
    )


def test_smooth_zero_padded_interior_matches_serial(random_image):
    np.testing.assert_array_equal(
        smooth_zero_padded(random_image)[INNER],
        apply_filter(random_image, "smooth", "serial")[INNER],
    )


def test_smooth_zero_padded_darkens_border():
    image = np.full((5, 6), 255, dtype=np.uint8)
    out = smooth_zero_padded(image)
    assert out[2, 2] == 255
    assert out[0, 0] < out[0, 2] < out[2, 2]
    np.testing.assert_array_equal(out, np.flip(out))