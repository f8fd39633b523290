from .http_reference_image_storage import HttpReferenceImageStorage
from .opencv_video_source import OpenCVVideoSource

__all__ = [
    "HttpReferenceImageStorage",
    "OpenCVVideoSource",
]
