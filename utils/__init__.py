from importlib import import_module

from .logger import get_logger

_LAZY_MODULES = {
    "DlibFaceRecognizer": "utils.DlibFaceRecognizer",
}

_HELPER_EXPORTS = {
    "euclidean_distance",
    "eye_roll_angle",
    "decode_image_bytes",
    "load_image",
    "draw_bbox_info",
    "draw_banner",
    "clear_overlay",
    "face_brightness",
}

__all__ = [
    "get_logger",
    "DlibFaceRecognizer",
    *sorted(_HELPER_EXPORTS),
]


def __getattr__(name):
    if name in _LAZY_MODULES:
        module = import_module(_LAZY_MODULES[name])
        attr = getattr(module, name)
        globals()[name] = attr
        return attr
    if name in _HELPER_EXPORTS:
        helpers = import_module("utils.helpers")
        attr = getattr(helpers, name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module 'utils' has no attribute '{name}'")
