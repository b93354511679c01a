from .fov import UNSEEN, VISIBLE, compute_visibility
from .tracker import VisibilityState, VisibilityTracker

__all__ = ["UNSEEN", "VISIBLE", "VisibilityState", "VisibilityTracker", "compute_visibility"]
