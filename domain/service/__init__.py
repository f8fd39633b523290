from .human_face_detection import HumanFaceDetection
from .reference_image_storage import ReferenceImageStorage
from .video_source import VideoSource

__all__=[
    "HumanFaceDetection",
    "ReferenceImageStorage",
    "VideoSource",
]
