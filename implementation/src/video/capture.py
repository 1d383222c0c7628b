import logging
import os
import time

import cv2
import numpy as np


class VideoCapture:
    def __init__(self, source=0, max_fps=60):
        """Initialize video capture."""
        self.logger = logging.getLogger('VitalPulse.VideoCapture')

        self.cap = None
        self.source = source  # Camera index or video file path
        self.frame_count = 0
        self.fps = 0
        self.resolution = (0, 0)
        self.last_frame_time = None
        self.min_frame_interval = 1.0 / max_fps
        self.logger.info("VideoCapture initialized")

    @property
    def is_file(self):
        return isinstance(self.source, str)

    def start(self, source=None):
        """Start video capture from specified source."""
        if source is not None:
            self.source = source

        # Stop any existing capture
        self.stop()

        self.logger.info("Attempting to open video source: %s", self.source)

        if self.is_file and not os.path.exists(self.source):
            self.logger.error("Video file not found: %s", self.source)
            raise FileNotFoundError(f"Video file not found: {self.source}")

        if self.is_file:
            self.cap = cv2.VideoCapture(self.source)
        else:
            # For cameras, try platform backends before the generic one
            for backend in (cv2.CAP_DSHOW, cv2.CAP_MSMF, cv2.CAP_ANY):
                self.cap = cv2.VideoCapture(self.source, backend)
                if self.cap.isOpened():
                    self.logger.info("Opened camera %d with backend %d", self.source, backend)
                    break

        if not self.cap.isOpened():
            self.logger.error("Failed to open video source: %s", self.source)
            self.cap = None
            return False

        self.fps = self.cap.get(cv2.CAP_PROP_FPS)
        width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.resolution = (width, height)
        self.logger.info("Video properties - FPS: %.2f, Resolution: %dx%d", self.fps, width, height)

        self.frame_count = 0
        self.last_frame_time = None
        return True

    def stop(self):
        """Stop video capture."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            self.logger.info("Video capture stopped after %d frames", self.frame_count)
            self.frame_count = 0
            self.last_frame_time = None

    def is_opened(self):
        return self.cap is not None and self.cap.isOpened()

    def read_frame(self):
        """Read a frame from the video source with frame rate control."""
        if not self.is_opened():
            self.logger.warning("Attempting to read from invalid capture")
            return None

        # Cameras are throttled, files are read as fast as they decode
        if not self.is_file and self.last_frame_time is not None:
            elapsed = time.time() - self.last_frame_time
            if elapsed < self.min_frame_interval:
                time.sleep(self.min_frame_interval - elapsed)

        ret, frame = self.cap.read()
        if not ret or frame is None:
            if self.is_file:
                self.logger.info("End of video file reached")
            else:
                self.logger.warning("Failed to read frame %d", self.frame_count + 1)
            return None

        self.frame_count += 1
        self.last_frame_time = time.time()

        if frame.size == 0 or not np.all(np.isfinite(frame)):
            self.logger.warning("Invalid frame detected")
            return None

        return frame

    def measure_frame_period(self, sampler, iterations=30):
        """Nominal time between frames in milliseconds.

        Files report it through their frame rate. Cameras are timed by pushing
        ``iterations`` frames through ``sampler`` (an object with ``sample``
        and ``drop_timer``), ignoring the first one which is often delayed.
        Returns None if the source is not open.
        """
        if not self.is_opened():
            self.logger.error("Cannot measure frame period, capture is not open")
            return None

        if self.is_file and self.fps > 0:
            return 1000.0 / self.fps

        total = 0.0
        counted = 0
        sampler.drop_timer()
        for i in range(iterations):
            frame = self.read_frame()
            if frame is None:
                continue
            _, elapsed_ms = sampler.sample(frame)
            if i > 0:
                total += elapsed_ms
                counted += 1

        if counted == 0:
            self.logger.error("No frames available to measure frame period")
            return None
        period = total / counted
        self.logger.info("Measured frame period: %.2f ms", period)
        return period

    def get_fps(self):
        return self.fps

    def get_resolution(self):
        return self.resolution

    def get_frame_count(self):
        return self.frame_count

    def __del__(self):
        """Cleanup resources."""
        self.stop()
