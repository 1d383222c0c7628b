import numpy as np


def skin_mask(region):
    """Boolean mask of skin-coloured pixels in a BGR image.

    Uses the explicit RGB rule R > 95, G > 40, B > 20, R > G,
    R - min(G, B) > 5 and R - G > 5.
    """
    region = region.astype(np.int16)
    b, g, r = region[..., 0], region[..., 1], region[..., 2]
    return ((r > 95) & (r > g) & (g > 40) & (b > 20)
            & ((r - np.minimum(g, b)) > 5) & ((r - g) > 5))


def ellipse_mask(shape, ellipse_rect):
    """Mask of pixels strictly inside the ellipse inscribed in ``ellipse_rect``.

    ``ellipse_rect`` is (x, y, w, h) in the coordinates of an image of the
    given (rows, cols) shape; it may extend past the image borders.
    """
    x, y, w, h = ellipse_rect
    rows, cols = shape[:2]
    if w <= 0 or h <= 0:
        return np.zeros((rows, cols), dtype=bool)
    jj, ii = np.mgrid[0:rows, 0:cols]
    cx = (x + w / 2.0 - ii) / (w / 2.0)
    cy = (y + h / 2.0 - jj) / (h / 2.0)
    return (cx * cx + cy * cy) < 1.0
