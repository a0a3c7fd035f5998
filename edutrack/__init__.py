"""EduTrack: clickstream tracking and dashboard analytics for learning platforms."""
