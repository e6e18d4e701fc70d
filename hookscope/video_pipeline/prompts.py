"""
Instructions sent to the inference providers.

Each prompt pins down the JSON schema the matching parser in
core/analysis/responses.py expects.
"""

from typing import List

FRAME_ANALYSIS_PROMPT = """Analyze this video frame at timestamp {timestamp:.2f}s. Provide:
1. Brief description of what's happening
2. Main objects/elements visible
3. Dominant colors
4. Composition (close-up, wide shot, etc.)
5. Actions or movements

Respond with a single JSON object with keys: description (string), objects (array of strings),
colors (array of strings), composition (string), actions (array of strings)."""


HOOK_DETECTION_PROMPT = """You are reviewing the opening {window_end:g} seconds of a short-form vertical video.
The {frame_count} images are frames sampled in order at these timestamps (seconds): {timestamps}.

Audio transcription of the whole video:
\"\"\"{transcript}\"\"\"

Identify the single strongest attention-grabbing element ("hook") in this opening window, judging the
frames and the audio together. Respond with a single JSON object with keys:
- timestamp: number, seconds into the video where the hook lands (between 0 and {window_end:g})
- type: one of "visual", "verbal", "text", "movement", "sound", "mixed"
- strength: one of "low", "medium", "high", "extreme"
- description: string, what the hook is and why it works
- keyElements: array of strings
- replicationTips: array of strings, how a creator could reproduce it
- visualCues: array of strings (optional)
- audioCues: array of strings (optional)
- confidence: number between 0 and 1"""


CONTEXT_AGGREGATION_PROMPT = """Analyze this short-form video and provide context:

Video Duration: {duration:.2f}s
Dimensions: {resolution}
FPS: {frame_rate:.2f}

Transcription:
{transcript}

Frame-by-frame analysis:
{frame_lines}

Provide a JSON analysis with:
1. videoType: (tutorial, entertainment, storytelling, product-demo, dance, transition, etc.)
2. style: Overall visual style
3. pacing: (fast, medium, slow)
4. hooks: Array of attention-grabbing elements in first 3 seconds
5. dominantColors: Top 3-5 colors throughout video
6. mood: Overall emotional tone
7. targetAudience: Who this content is for"""


def format_timestamps(timestamps: List[float]) -> str:
    return ", ".join(f"{t:g}" for t in timestamps)
