#!/usr/bin/env python3
"""Create demo assets for testing.

Creates a stereo and a mono test tone for waveform extraction demos.
"""

import subprocess
import sys
from pathlib import Path

DEMO_ASSETS_DIR = Path(__file__).parent.parent / "demo_assets"


def create_tone(name: str, channel_layout: str, duration: float = 4.0) -> bool:
    """Create a tone with a rising volume ramp using ffmpeg.

    Args:
        name: Output file name inside demo_assets/.
        channel_layout: "stereo" or "mono".
        duration: Length in seconds.

    Returns:
        True if the file exists afterwards.
    """
    audio_path = DEMO_ASSETS_DIR / name

    if audio_path.exists():
        print(f"Demo audio already exists: {audio_path}")
        return True

    try:
        result = subprocess.run(
            [
                "ffmpeg",
                "-y",
                "-f",
                "lavfi",
                "-i",
                f"sine=frequency=440:duration={duration}",
                "-af",
                f"volume='t/{duration}':eval=frame,aformat=channel_layouts={channel_layout}",
                "-c:a",
                "pcm_s16le",
                str(audio_path),
            ],
            capture_output=True,
            text=True,
            timeout=30,
        )

        if result.returncode == 0:
            print(f"Created demo audio: {audio_path}")
            return True
        else:
            print(f"Failed to create demo audio: {result.stderr}")
            return False

    except FileNotFoundError:
        print("ffmpeg not found. Please install ffmpeg to create demo assets.")
        return False
    except subprocess.TimeoutExpired:
        print("ffmpeg timed out")
        return False


def main():
    """Create all demo assets."""
    DEMO_ASSETS_DIR.mkdir(exist_ok=True)

    stereo_ok = create_tone("demo_stereo.wav", "stereo")
    mono_ok = create_tone("demo_mono.wav", "mono")

    if stereo_ok and mono_ok:
        print("Demo assets created successfully!")
        return 0
    else:
        print("Some demo assets could not be created.")
        print("Please ensure ffmpeg is installed.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
