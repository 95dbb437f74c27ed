"""
Keypoint-based motion model.

An alternative to the scan-line model: ORB keypoints are matched between
consecutive frames and a similarity transform is fitted with RANSAC.
"""

import logging

import cv2
import numpy as np

from tflow.core.base import BaseMotionModel, MotionEstimate

logger = logging.getLogger(__name__)


def _to_gray(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return frame
    return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)


def find_key_points(frame: np.ndarray, num_features: int = 500) -> np.ndarray:
    """
    Detect ORB keypoints.

    Args:
        frame: BGR or greyscale frame
        num_features: Maximum number of keypoints

    Returns:
        Nx2 array of keypoint positions with the origin in the bottom left
    """
    gray = _to_gray(frame)
    detector = cv2.ORB_create(nfeatures=num_features)
    key_points = detector.detect(gray, None)

    height = gray.shape[0]
    return np.array(
        [(kp.pt[0], height - kp.pt[1]) for kp in key_points],
        dtype=np.float64,
    ).reshape(-1, 2)


class OpticalFlowMotionModel(BaseMotionModel):
    """
    Estimate frame-to-frame translation from matched ORB keypoints.

    Example:
        >>> model = OpticalFlowMotionModel(num_features=1000)
        >>> for frame_num, frame in reader:
        ...     estimate = model.update(frame)
    """

    def __init__(
        self,
        num_features: int = 500,
        match_ratio: float = 0.75,
        min_matches: int = 8,
        ransac_threshold: float = 3.0,
    ):
        """
        Args:
            num_features: Maximum ORB keypoints per frame
            match_ratio: Lowe ratio test threshold
            min_matches: Minimum good matches (and inliers) for an estimate
            ransac_threshold: RANSAC reprojection threshold in pixels
        """
        super().__init__()
        self.num_features = num_features
        self.match_ratio = match_ratio
        self.min_matches = min_matches
        self.ransac_threshold = ransac_threshold

        self.detector = cv2.ORB_create(nfeatures=num_features)
        self.matcher = cv2.BFMatcher(cv2.NORM_HAMMING, crossCheck=False)

        self.prev_key_points = None
        self.prev_descriptors: np.ndarray | None = None

    def _match(self, prev_descriptors: np.ndarray, descriptors: np.ndarray) -> list:
        good = []
        for pair in self.matcher.knnMatch(prev_descriptors, descriptors, k=2):
            if len(pair) < 2:
                continue
            m, n = pair
            if m.distance < self.match_ratio * n.distance:
                good.append(m)
        return good

    def update(self, frame: np.ndarray) -> MotionEstimate | None:
        self.frame_count += 1
        key_points, descriptors = self.detector.detectAndCompute(_to_gray(frame), None)

        prev_key_points, prev_descriptors = self.prev_key_points, self.prev_descriptors
        self.prev_key_points, self.prev_descriptors = key_points, descriptors

        if prev_descriptors is None or descriptors is None or len(descriptors) < 2:
            return None

        matches = self._match(prev_descriptors, descriptors)

        if len(matches) < self.min_matches:
            logger.warning("Frame %d: only %d keypoint matches", self.frame_count, len(matches))
            return None

        pts_prev = np.float32([prev_key_points[m.queryIdx].pt for m in matches]).reshape(-1, 1, 2)
        pts_curr = np.float32([key_points[m.trainIdx].pt for m in matches]).reshape(-1, 1, 2)

        matrix, inliers = cv2.estimateAffinePartial2D(
            pts_prev, pts_curr,
            method=cv2.RANSAC,
            ransacReprojThreshold=self.ransac_threshold,
        )
        num_inliers = int(np.sum(inliers)) if inliers is not None else 0
        if matrix is None or num_inliers < self.min_matches:
            logger.warning("Frame %d: RANSAC found %d inliers", self.frame_count, num_inliers)
            return None

        return MotionEstimate(
            frame=self.frame_count,
            offset=(float(matrix[0, 2]), float(matrix[1, 2])),
            samples=num_inliers,
            features=len(key_points),
        )

    def reset(self) -> None:
        super().reset()
        self.prev_key_points = None
        self.prev_descriptors = None
