"""
Image acquisition: selected files, folders and camera snapshots.
"""

import io
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import AcquisitionDenied, AcquisitionError
from .models import ImageResource
from .utils import SUPPORTED_EXTS, epoch_millis, guess_mime_type, size_fmt

DEFAULT_MAX_UPLOAD_MB = 10
JPEG_QUALITY = 80


class AcquisitionQueue:
    """Images waiting to be submitted, in selection order."""

    def __init__(self, images: Iterable[ImageResource] = ()):
        self._images: List[ImageResource] = list(images)

    def enqueue(self, image: ImageResource):
        self._images.append(image)

    def extend(self, images: Iterable[ImageResource]):
        self._images.extend(images)

    def queue(self) -> Tuple[ImageResource, ...]:
        return tuple(self._images)

    def clear(self):
        self._images = []

    def __len__(self) -> int:
        return len(self._images)


def discover_files(paths: Iterable[Path]) -> List[Path]:
    """
    Expand the given paths into supported image files.

    Folders contribute their supported files sorted by name; files are kept
    in the order given. Unsupported files are skipped with a warning.
    """
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS
            ))
        elif path.suffix.lower() in SUPPORTED_EXTS:
            files.append(path)
        else:
            print(f"[WARN] Skipping {path.name}: unsupported file type")
    return files


def load_image(path: Path, max_bytes: Optional[int] = None) -> ImageResource:
    """Read a selected file into an ImageResource."""
    if path.suffix.lower() not in SUPPORTED_EXTS:
        raise AcquisitionError(f"Unsupported file type: {path.name}")
    if not path.is_file():
        raise AcquisitionError(f"File not found: {path}")
    size = path.stat().st_size
    if max_bytes is not None and size > max_bytes:
        raise AcquisitionError(
            f"{path.name} is {size_fmt(size)}, over the {size_fmt(max_bytes)} limit")
    return ImageResource(name=path.name, content=path.read_bytes(),
                         mime_type=guess_mime_type(path))


def load_images(paths: Iterable[Path], max_bytes: Optional[int] = None) -> List[ImageResource]:
    """Load every file that can be read; report the others and move on."""
    images = []
    for path in paths:
        try:
            images.append(load_image(path, max_bytes=max_bytes))
        except (AcquisitionError, OSError) as e:
            print(f"[WARN] Skipping {path.name}: {e}")
    return images


def _open_video_device(index: int):
    import cv2
    return cv2.VideoCapture(index)


class CameraCapture:
    """
    Single camera stream that turns frames into JPEG ImageResources.

    Use as a context manager so the device is released on every exit path:

        with CameraCapture() as camera:
            queue.enqueue(camera.capture())
    """

    def __init__(self, device_index: int = 0,
                 device_factory: Optional[Callable[[int], object]] = None,
                 quality: int = JPEG_QUALITY):
        self.device_index = device_index
        self.quality = quality
        self._device_factory = device_factory or _open_video_device
        self._device = None

    @property
    def active(self) -> bool:
        return self._device is not None

    def start(self):
        if self._device is not None:
            return
        try:
            device = self._device_factory(self.device_index)
        except Exception as e:
            raise AcquisitionDenied(f"Camera access denied or not available: {e}") from e
        if device is None or not device.isOpened():
            if device is not None:
                device.release()
            raise AcquisitionDenied()
        self._device = device

    def stop(self):
        if self._device is None:
            return
        try:
            self._device.release()
        finally:
            self._device = None

    def capture(self) -> ImageResource:
        """Grab one frame and encode it as a JPEG photo."""
        from PIL import Image

        if self._device is None:
            raise AcquisitionError("Camera is not started")
        ok, frame = self._device.read()
        if not ok or frame is None:
            raise AcquisitionError("Could not read a frame from the camera")

        # OpenCV frames are BGR
        img = Image.fromarray(frame[:, :, ::-1].copy())
        buf = io.BytesIO()
        img.save(buf, format="JPEG", quality=self.quality)
        return ImageResource(name=f"bill-photo-{epoch_millis()}.jpg",
                             content=buf.getvalue(), mime_type="image/jpeg")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
