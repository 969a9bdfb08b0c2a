"""
ExerTrack: exercise form evaluation and repetition counting from pose keypoints.
"""

__version__ = "0.1.0"
