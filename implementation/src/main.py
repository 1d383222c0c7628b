import argparse
import logging
import sys
from pathlib import Path

import cv2

from face_detection.detector import FaceProcessor
from signal_processing.exceptions import ConfigurationError
from signal_processing.profiles import Profile
from signal_processing.processor import PulseProcessor
from video.capture import VideoCapture


def setup_logging(level=logging.INFO):
    """Set up logging configuration."""
    log_dir = Path(__file__).parent / 'logs'
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_dir / 'app.log'),
            logging.StreamHandler()
        ]
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Estimate heart or breath rate from a face video.")
    parser.add_argument('--source', default='0', help="camera index or path to a video file")
    parser.add_argument('--profile', default=Profile.HEART_RATE.value, choices=[p.value for p in Profile])
    parser.add_argument('--cascade', default=None, help="Haar cascade file for face detection")
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--display', action='store_true', help="show the video with the current estimate")
    args = parser.parse_args(argv)
    if args.source.isdigit():
        args.source = int(args.source)
    return args


def draw(frame, face_processor, processor):
    x, y, w, h = face_processor.get_face_rect()
    if w > 0 and h > 0:
        cv2.rectangle(frame, (x, y), (x + w, y + h), (0, 255, 0), 1)
    frequency = processor.frequency
    text = f"{frequency:.0f} per min, SNR {processor.snr:.1f}" if frequency > 0 else "measuring..."
    cv2.putText(frame, text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 0), 2)
    cv2.imshow('VitalPulse', frame)
    # Esc stops the loop
    return cv2.waitKey(1) & 0xFF != 27


def run(args):
    capture = VideoCapture(args.source)
    if not capture.start():
        return 1

    face_processor = FaceProcessor(args.cascade)
    if face_processor.empty():
        return 1

    period = capture.measure_frame_period(face_processor)
    if period is None:
        return 1

    processor = PulseProcessor(args.profile, period)
    samples_per_report = max(1, int(1000.0 / period))
    face_processor.drop_timer()
    count = 0
    try:
        while True:
            frame = capture.read_frame()
            if frame is None:
                break
            value, elapsed = face_processor.sample(frame)
            if capture.is_file:
                # Wall clock means nothing when decoding a file
                elapsed = period
            processor.update(value, elapsed)
            frequency = processor.compute_frequency()

            count += 1
            if count % samples_per_report == 0:
                logging.info("Rate: %.1f per minute (SNR %.2f, interval %d)",
                             frequency, processor.snr, processor.interval)
            if args.display and not draw(frame, face_processor, processor):
                break
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        capture.stop()
        if args.display:
            cv2.destroyAllWindows()
    return 0


def main(argv=None):
    """Main entry point of the application."""
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level))
    logging.info("Starting VitalPulse")
    try:
        return run(args)
    except (ConfigurationError, FileNotFoundError) as e:
        logging.error("Cannot start measurement: %s", str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
