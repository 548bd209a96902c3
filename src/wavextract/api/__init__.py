"""API module for wavextract.

API layer:
- Validates inputs, starts/cancels extraction sessions
- Returns session status payloads for UI polling
- Forbidden: decoding, ffmpeg work, RMS computation
"""
