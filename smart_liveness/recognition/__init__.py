from .matcher import FaceMatcher, recognize_face

__all__ = ["FaceMatcher", "recognize_face"]
