"""
Video Translator - dub Chinese short-form videos into another language.

A small web service and CLI for:
- Storing an uploaded video under a request-scoped token
- Extracting its audio track with ffmpeg
- Transcribing Mandarin speech (Google Cloud Speech-to-Text)
- Translating the transcript (Google Cloud Translation)
- Synthesizing translated speech (Google Cloud Text-to-Speech)
- Muxing the new audio back onto the original video stream
"""

__version__ = "0.1.0"
