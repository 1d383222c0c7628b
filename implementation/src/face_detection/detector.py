import logging
import time

import cv2
import numpy as np

from .skin import ellipse_mask, skin_mask

# Number of recent face rectangles averaged for a steady region
FACE_HISTORY_LENGTH = 33


class FaceProcessor:
    """Mean green intensity of the skin inside the biggest detected face.

    Acts as the region-intensity source of the pulse processor: ``sample``
    returns ``(value, elapsed_ms)`` for every frame.
    """

    def __init__(self, cascade_path=None, min_face_size=(100, 120)):
        """Initialize face processor."""
        self.logger = logging.getLogger('VitalPulse.FaceProcessor')

        if cascade_path is None:
            cascade_path = cv2.data.haarcascades + 'haarcascade_frontalface_default.xml'
        self.face_cascade = cv2.CascadeClassifier()
        self.load_classifier(cascade_path)

        self.min_face_size = tuple(min_face_size)
        self.blur_size = (3, 3)

        self.rects = np.zeros((FACE_HISTORY_LENGTH, 4))
        self.rect_pos = 0
        self.no_face_frames = 0
        self.first_face = True

        self.face_rect = (0, 0, 0, 0)
        self.ellipse_rect = (0, 0, 0, 0)
        self.mark_time = time.time()

    def load_classifier(self, filename):
        loaded = self.face_cascade.load(filename)
        if loaded:
            self.logger.info("Loaded face classifier: %s", filename)
        else:
            self.logger.error("Could not load face classifier: %s", filename)
        return loaded

    def empty(self):
        return self.face_cascade.empty()

    def drop_timer(self):
        """Restart the clock used for elapsed times."""
        self.mark_time = time.time()

    def sample(self, frame):
        """Return (mean skin green, ms since previous call) for a BGR frame."""
        value = 0.0
        area = 0
        if frame is not None and frame.size > 0:
            try:
                value, area = self._measure(frame)
            except cv2.error as e:
                self.logger.error("Face processing error: %s", str(e))

        now = time.time()
        elapsed_ms = (now - self.mark_time) * 1000.0
        self.mark_time = now

        min_area = self.min_face_size[0] * self.min_face_size[1] // 2
        if area <= min_area:
            value = 0.0
        return value, elapsed_ms

    def _measure(self, frame):
        img, scale_x, scale_y = self._downscale(frame)

        faces = ()
        if not self.face_cascade.empty():
            faces = self.face_cascade.detectMultiScale(
                img, scaleFactor=1.15, minNeighbors=5, flags=cv2.CASCADE_FIND_BIGGEST_OBJECT,
                minSize=self.min_face_size
            )

        if len(faces) > 0:
            self._update_rects(faces[0])
            self.no_face_frames = 0
            self.first_face = False
        else:
            self.no_face_frames += 1
            if self.no_face_frames == FACE_HISTORY_LENGTH:
                self.logger.info("Face lost for %d frames, resetting region", FACE_HISTORY_LENGTH)
                self.first_face = True
                self._update_rects((0, 0, 0, 0))

        self.face_rect = self._scaled_rect(self._mean_rect(), scale_x, scale_y, frame.shape)
        x, y, w, h = self.face_rect
        if w * h <= 0 or self.no_face_frames >= FACE_HISTORY_LENGTH:
            return 0.0, 0

        region = cv2.blur(frame[y:y + h, x:x + w], self.blur_size)
        dx = w // 16
        dy = h // 30
        # Ellipse inside the face rectangle, stretched upwards over the forehead
        self.ellipse_rect = (dx, -6 * dy, w - 2 * dx, h + 6 * dy)

        columns = slice(dx, dx + self.ellipse_rect[2])
        mask = skin_mask(region)[:, columns] & ellipse_mask(region.shape, self.ellipse_rect)[:, columns]
        area = int(np.count_nonzero(mask))
        if area == 0:
            return 0.0, 0
        green = float(np.sum(region[:, columns, 1][mask], dtype=np.int64))
        return green / area, area

    def _downscale(self, frame):
        rows, cols = frame.shape[:2]
        if cols <= 640 and rows <= 480:
            return frame, 1.0, 1.0
        if cols / rows > 14.0 / 9.0:
            size = (640, 360)
        else:
            size = (640, 480)
        img = cv2.resize(frame, size, interpolation=cv2.INTER_AREA)
        return img, cols / size[0], rows / size[1]

    def _update_rects(self, rect):
        if not self.first_face:
            self.rects[self.rect_pos] = rect
            self.rect_pos = (self.rect_pos + 1) % FACE_HISTORY_LENGTH
        else:
            self.rects[:] = rect

    def _mean_rect(self):
        return [int(v) for v in np.mean(self.rects, axis=0)]

    @staticmethod
    def _scaled_rect(rect, scale_x, scale_y, shape):
        """Scale a rectangle back to frame coordinates and clip it to the frame."""
        x, y, w, h = rect
        x, y, w, h = int(x * scale_x), int(y * scale_y), int(w * scale_x), int(h * scale_y)
        rows, cols = shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, cols), min(y + h, rows)
        if x1 <= x0 or y1 <= y0:
            return (0, 0, 0, 0)
        return (x0, y0, x1 - x0, y1 - y0)

    def get_face_rect(self):
        return self.face_rect
