from .audio_extractor import AudioExtractor
from .frame_sampler import FrameSampler, uniform_timestamps, window_timestamps
from .probe import MediaProbe, parse_frame_rate

__all__ = [
    "AudioExtractor",
    "FrameSampler",
    "MediaProbe",
    "parse_frame_rate",
    "uniform_timestamps",
    "window_timestamps",
]
