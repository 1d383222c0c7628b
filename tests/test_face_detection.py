import numpy as np

from face_detection.detector import FaceProcessor
from face_detection.skin import ellipse_mask, skin_mask


def test_skin_rule():
    pixels = np.array([[
        [60, 100, 180],   # skin tone (BGR)
        [60, 100, 90],    # red too low
        [120, 120, 120],  # grey
        [10, 100, 180],   # blue too low
        [60, 178, 180],   # red barely above green
    ]], dtype=np.uint8)
    assert list(skin_mask(pixels)[0]) == [True, False, False, False, False]


def test_ellipse_mask():
    mask = ellipse_mask((20, 30), (0, 0, 30, 20))
    assert mask[10, 15]
    assert not mask[0, 0]
    assert not mask[19, 29]


def test_ellipse_outside_image_rows():
    # Ellipse starting above the image only covers its upper half
    mask = ellipse_mask((10, 10), (0, -10, 10, 20))
    assert mask[0, 5]
    assert not mask[9, 0]


def test_empty_ellipse():
    assert not ellipse_mask((5, 5), (0, 0, 0, 4)).any()


def test_no_face_gives_zero_value():
    processor = FaceProcessor()
    processor.drop_timer()
    value, elapsed = processor.sample(np.zeros((480, 640, 3), dtype=np.uint8))
    assert value == 0.0
    assert elapsed >= 0.0
    assert processor.get_face_rect() == (0, 0, 0, 0)


def test_large_frames_are_downscaled():
    processor = FaceProcessor()
    img, scale_x, scale_y = processor._downscale(np.zeros((720, 1280, 3), dtype=np.uint8))
    assert img.shape[:2] == (360, 640)
    assert (scale_x, scale_y) == (2.0, 2.0)

    img, scale_x, scale_y = processor._downscale(np.zeros((960, 1280, 3), dtype=np.uint8))
    assert img.shape[:2] == (480, 640)
